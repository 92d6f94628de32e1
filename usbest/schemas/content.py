# usbest/schemas/content.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["ad", "remix", "survey"]


# ---------- Inputs ----------

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
QUESTION_MAX_LENGTH = 500


def _trimmed(v: str, max_length: int, what: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{what} must not be empty")
    if len(v) > max_length:
        raise ValueError(f"{what} must be at most {max_length} characters")
    return v


class _PostIn(BaseModel):
    title: str
    description: str
    media_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        return _trimmed(v, TITLE_MAX_LENGTH, "title")

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str) -> str:
        return _trimmed(v, DESCRIPTION_MAX_LENGTH, "description")


def _check_http_url(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    parsed = urlparse(v.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return v.strip()


class AdCreateIn(_PostIn):
    brand: Optional[str] = None
    shop_url: Optional[str] = None

    @field_validator("shop_url")
    @classmethod
    def shop_url_is_http(cls, v: Optional[str]) -> Optional[str]:
        return _check_http_url(v)


class RemixCreateIn(_PostIn):
    ad_id: Optional[UUID] = None


class SurveyQuestionIn(BaseModel):
    question: str
    options: List[str] = Field(default_factory=list)

    @field_validator("question")
    @classmethod
    def question_length(cls, v: str) -> str:
        return _trimmed(v, QUESTION_MAX_LENGTH, "question")

    @field_validator("options")
    @classmethod
    def drop_blank_options(cls, v: List[str]) -> List[str]:
        return [o.strip() for o in v if o and o.strip()]


class SurveyCreateIn(_PostIn):
    brand: Optional[str] = None
    questions: List[SurveyQuestionIn] = Field(..., min_length=1)


# ---------- Outputs ----------

class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class FeedItemOut(BaseModel):
    id: UUID
    content_type: ContentType
    title: str
    description: str
    brand: Optional[str] = None
    media_url: Optional[str] = None
    shop_url: Optional[str] = None
    created_at: datetime
    likes: int = 0
    comments: int = 0
    is_liked: bool = False


class FeedOut(BaseModel):
    items: List[FeedItemOut]
    limit: int
    offset: int


class ReviewOut(BaseModel):
    id: UUID
    user_id: UUID
    user: str
    rating: int
    text: str
    created_at: datetime


class SurveyQuestionOut(BaseModel):
    question: str
    options: List[str] = Field(default_factory=list)


class ContentDetailOut(BaseModel):
    id: UUID
    content_type: ContentType
    title: str
    description: str
    brand: Optional[str] = None
    media_url: Optional[str] = None
    created_at: datetime
    # ad
    shop_url: Optional[str] = None
    reviews: Optional[List[ReviewOut]] = None
    average_rating: Optional[float] = None
    # remix
    remix_parent_id: Optional[UUID] = None
    remix_parent_title: Optional[str] = None
    # survey
    questions: Optional[List[SurveyQuestionOut]] = None


class SearchResultOut(BaseModel):
    id: UUID
    content_type: ContentType
    title: str
    brand: Optional[str] = None
    media_url: Optional[str] = None


class CreatedOut(BaseModel):
    id: UUID
    content_type: ContentType
    created_at: datetime
