# usbest/schemas/engagement.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from usbest.schemas.content import ProfileOut

COMMENT_MAX_LENGTH = 400


class EngagementOut(BaseModel):
    likes: int
    comments: int
    is_liked: bool


class CommentIn(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def trimmed_length(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("comment must not be empty")
        if len(v) > COMMENT_MAX_LENGTH:
            raise ValueError(f"comment must be at most {COMMENT_MAX_LENGTH} characters")
        return v


class CommentOut(BaseModel):
    id: UUID
    user_id: UUID
    text: str
    created_at: datetime
    profile: Optional[ProfileOut] = None


class ReviewIn(BaseModel):
    rating: int = Field(5, ge=1, le=5)
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("review text must not be empty")
        return v
