# usbest/schemas/dashboard.py
from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from usbest.schemas.content import ContentType


class RecentPostOut(BaseModel):
    id: UUID
    title: str
    content_type: ContentType
    likes: int
    comments: int
    created_at: datetime


class DashboardOut(BaseModel):
    total_posts: int
    total_likes: int
    total_comments: int
    likes_per_post: float
    comments_per_post: float
    recent_posts: List[RecentPostOut] = Field(default_factory=list)
