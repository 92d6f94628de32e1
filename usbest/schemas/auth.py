# usbest/schemas/auth.py
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr


class MeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    display_name: str | None = None
    avatar_url: str | None = None
