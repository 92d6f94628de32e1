# usbest/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends

from usbest.core.security import get_current_user
from usbest.models.profile import Profile
from usbest.schemas.auth import MeOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=MeOut)
def me(current_user: Profile = Depends(get_current_user)):
    """Profile behind the bearer token."""
    return MeOut.model_validate(current_user)
