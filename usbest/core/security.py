# usbest/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from usbest.core.config import settings
from usbest.db.session import get_db
from usbest.models.profile import Profile

# Tokens come from the identity provider; this service only verifies them
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(subject: dict[str, Any], expires_minutes: int | None = None) -> str:
    """
    Issues a token shaped like the identity provider's (local runs and tests).
    'sub' is normalized to str; 'iat' is epoch seconds.
    """
    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    now = datetime.now(timezone.utc)
    claims = dict(subject)
    if "sub" in claims and not isinstance(claims["sub"], str):
        claims["sub"] = str(claims["sub"])
    if settings.JWT_AUDIENCE and "aud" not in claims:
        claims["aud"] = settings.JWT_AUDIENCE

    to_encode = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """Requires 'exp' and 'iat' and checks expiry (5s leeway for clock skew)."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE or None,
            options={"require": ["exp", "iat"], "verify_exp": True, "verify_aud": bool(settings.JWT_AUDIENCE)},
            leeway=5,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def _profile_from_token(db: Session, token: str) -> Profile:
    payload = decode_token(token)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token without subject")
    try:
        user_id = UUID(str(sub))
    except ValueError:
        raise HTTPException(status_code=401, detail="Token with invalid 'sub'")

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise HTTPException(status_code=401, detail="Profile not found")
    return profile


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    if not credentials:
        raise HTTPException(status_code=401, detail="Login required")
    return _profile_from_token(db, credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    """Anonymous reads are allowed; a token that is present must still be valid."""
    if not credentials:
        return None
    return _profile_from_token(db, credentials.credentials)
