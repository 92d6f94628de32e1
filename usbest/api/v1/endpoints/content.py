# usbest/api/v1/endpoints/content.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from usbest.core.config import settings
from usbest.core.security import get_optional_user
from usbest.db.session import get_db
from usbest.models.content import Ad, Remix, Survey
from usbest.models.engagement import Review
from usbest.models.profile import Profile
from usbest.schemas.content import (
    ContentDetailOut,
    FeedItemOut,
    FeedOut,
    ReviewOut,
    SearchResultOut,
    SurveyQuestionOut,
)
from usbest.services.content import engagement_for, get_content_or_404
from usbest.services.survey_flow import normalize_questions

router = APIRouter(tags=["content"])

MAX_PAGE_SIZE = 100
DEFAULT_REVIEWER = "User"


def _feed_item(content_type: str, item, counts: dict) -> FeedItemOut:
    return FeedItemOut(
        id=item.id,
        content_type=content_type,
        title=item.title,
        description=item.description,
        brand=getattr(item, "brand", None),
        media_url=item.media_url,
        shop_url=getattr(item, "shop_url", None),
        created_at=item.created_at,
        **counts,
    )


@router.get("/feed", response_model=FeedOut)
def feed(
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current: Optional[Profile] = Depends(get_optional_user),
):
    """Ads, remixes and surveys merged newest first, with engagement counts."""
    limit = limit or settings.FEED_PAGE_SIZE
    window = offset + limit

    merged = []
    for content_type, model in (("ad", Ad), ("remix", Remix), ("survey", Survey)):
        rows = db.query(model).order_by(model.created_at.desc()).limit(window).all()
        merged.extend((content_type, r) for r in rows)

    merged.sort(key=lambda pair: pair[1].created_at, reverse=True)
    page = merged[offset:window]

    counts = engagement_for(
        db,
        [(ctype, item.id) for ctype, item in page],
        user_id=current.id if current else None,
    )
    return FeedOut(
        items=[_feed_item(ctype, item, counts[(ctype, item.id)]) for ctype, item in page],
        limit=limit,
        offset=offset,
    )


@router.get("/content/{content_type}/{content_id}", response_model=ContentDetailOut)
def content_detail(
    content_type: str = Path(..., description="ad | remix | survey"),
    content_id: UUID = Path(...),
    db: Session = Depends(get_db),
):
    item = get_content_or_404(db, content_type, content_id)
    out = ContentDetailOut(
        id=item.id,
        content_type=content_type,
        title=item.title,
        description=item.description,
        brand=getattr(item, "brand", None),
        media_url=item.media_url,
        created_at=item.created_at,
    )

    if content_type == "ad":
        reviews = (
            db.query(Review)
            .options(selectinload(Review.profile))
            .filter(Review.ad_id == item.id)
            .order_by(Review.created_at.desc())
            .all()
        )
        out.shop_url = item.shop_url
        out.reviews = [
            ReviewOut(
                id=r.id,
                user_id=r.user_id,
                user=(r.profile.display_name if r.profile else None) or DEFAULT_REVIEWER,
                rating=r.rating,
                text=r.text,
                created_at=r.created_at,
            )
            for r in reviews
        ]
        if reviews:
            out.average_rating = round(sum(r.rating for r in reviews) / len(reviews), 1)

    elif content_type == "remix":
        if item.ad_id:
            parent = db.query(Ad.title, Ad.brand).filter(Ad.id == item.ad_id).first()
            out.remix_parent_id = item.ad_id
            if parent:
                out.remix_parent_title = parent.title
                out.brand = parent.brand

    else:
        out.questions = [SurveyQuestionOut(**q) for q in normalize_questions(item.questions)]

    return out


@router.get("/search", response_model=list[SearchResultOut])
def search(
    q: str = Query("", max_length=200),
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Case-insensitive match on title or brand."""
    term = q.strip()
    pattern = f"%{term}%"

    results = []
    for content_type, model in (("ad", Ad), ("remix", Remix), ("survey", Survey)):
        query = db.query(model)
        if term:
            columns = [model.title.ilike(pattern)]
            if hasattr(model, "brand"):
                columns.append(model.brand.ilike(pattern))
            query = query.filter(or_(*columns))
        for item in query.order_by(model.created_at.desc()).limit(limit).all():
            results.append((content_type, item))

    results.sort(key=lambda pair: pair[1].created_at, reverse=True)
    return [
        SearchResultOut(
            id=item.id,
            content_type=ctype,
            title=item.title,
            brand=getattr(item, "brand", None),
            media_url=item.media_url,
        )
        for ctype, item in results[:limit]
    ]
