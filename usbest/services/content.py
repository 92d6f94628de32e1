# usbest/services/content.py
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from usbest.models.content import Ad, Remix, Survey
from usbest.models.engagement import Comment, Like
from usbest.models.types import CONTENT_TYPES

CONTENT_MODELS = {"ad": Ad, "remix": Remix, "survey": Survey}

ContentKey = tuple[str, UUID]


def content_model(content_type: str):
    if content_type not in CONTENT_TYPES:
        raise HTTPException(status_code=404, detail=f"Unknown content type '{content_type}'")
    return CONTENT_MODELS[content_type]


def get_content_or_404(db: Session, content_type: str, content_id: UUID):
    model = content_model(content_type)
    item = db.query(model).filter(model.id == content_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Content not found")
    return item


def _count_by_content(db: Session, model, keys: list[ContentKey]) -> Counter:
    counts: Counter = Counter()
    by_type: dict[str, list[UUID]] = {}
    for ctype, cid in keys:
        by_type.setdefault(ctype, []).append(cid)
    for ctype, ids in by_type.items():
        rows = (
            db.query(model.content_id, func.count(model.id))
            .filter(model.content_type == ctype, model.content_id.in_(ids))
            .group_by(model.content_id)
            .all()
        )
        for cid, n in rows:
            counts[(ctype, cid)] = int(n)
    return counts


def engagement_for(
    db: Session,
    keys: Iterable[ContentKey],
    user_id: Optional[UUID] = None,
) -> dict[ContentKey, dict]:
    """
    Likes, comments and the caller's own like for many items at once
    (one grouped query per content type instead of one per item).
    """
    keys = list(dict.fromkeys(keys))
    if not keys:
        return {}

    likes = _count_by_content(db, Like, keys)
    comments = _count_by_content(db, Comment, keys)

    liked: set[ContentKey] = set()
    if user_id:
        ids = [cid for _, cid in keys]
        rows = (
            db.query(Like.content_type, Like.content_id)
            .filter(Like.user_id == user_id, Like.content_id.in_(ids))
            .all()
        )
        liked = {(ctype, cid) for ctype, cid in rows}

    return {
        key: {"likes": likes[key], "comments": comments[key], "is_liked": key in liked}
        for key in keys
    }
