# usbest/api/v1/endpoints/engagement.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from usbest.core.security import get_current_user, get_optional_user
from usbest.db.session import get_db
from usbest.models.content import Ad
from usbest.models.engagement import Comment, Like, Review
from usbest.models.profile import Profile
from usbest.schemas.content import ProfileOut, ReviewOut
from usbest.schemas.engagement import CommentIn, CommentOut, EngagementOut, ReviewIn
from usbest.services.content import engagement_for, get_content_or_404

router = APIRouter(tags=["engagement"])
logger = logging.getLogger(__name__)


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not save %s", what)
        raise HTTPException(status_code=503, detail=f"Could not save the {what}. Please try again later.")


def _engagement(db: Session, content_type: str, content_id: UUID, user_id: Optional[UUID]) -> EngagementOut:
    counts = engagement_for(db, [(content_type, content_id)], user_id=user_id)
    return EngagementOut(**counts[(content_type, content_id)])


@router.get("/content/{content_type}/{content_id}/engagement", response_model=EngagementOut)
def engagement(
    content_type: str = Path(...),
    content_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Optional[Profile] = Depends(get_optional_user),
):
    get_content_or_404(db, content_type, content_id)
    return _engagement(db, content_type, content_id, current.id if current else None)


# -------------------- likes -------------------- #

@router.post("/content/{content_type}/{content_id}/like", response_model=EngagementOut)
def like(
    content_type: str = Path(...),
    content_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    """Idempotent: liking twice keeps one like."""
    get_content_or_404(db, content_type, content_id)
    exists = (
        db.query(Like.id)
        .filter(Like.user_id == current.id, Like.content_type == content_type, Like.content_id == content_id)
        .first()
    )
    if not exists:
        db.add(Like(user_id=current.id, content_type=content_type, content_id=content_id))
        try:
            db.commit()
        except IntegrityError:
            # a concurrent request already stored the same like
            db.rollback()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Could not save like")
            raise HTTPException(status_code=503, detail="Could not save the like. Please try again later.")
    return _engagement(db, content_type, content_id, current.id)


@router.delete("/content/{content_type}/{content_id}/like", response_model=EngagementOut)
def unlike(
    content_type: str = Path(...),
    content_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    get_content_or_404(db, content_type, content_id)
    db.query(Like).filter(
        Like.user_id == current.id,
        Like.content_type == content_type,
        Like.content_id == content_id,
    ).delete(synchronize_session=False)
    _commit(db, "like")
    return _engagement(db, content_type, content_id, current.id)


# -------------------- comments -------------------- #

def _comment_out(c: Comment) -> CommentOut:
    return CommentOut(
        id=c.id,
        user_id=c.user_id,
        text=c.text,
        created_at=c.created_at,
        profile=ProfileOut.model_validate(c.profile) if c.profile else None,
    )


@router.get("/content/{content_type}/{content_id}/comments", response_model=list[CommentOut])
def list_comments(
    content_type: str = Path(...),
    content_id: UUID = Path(...),
    db: Session = Depends(get_db),
):
    get_content_or_404(db, content_type, content_id)
    rows = (
        db.query(Comment)
        .options(selectinload(Comment.profile))
        .filter(Comment.content_type == content_type, Comment.content_id == content_id)
        .order_by(Comment.created_at.desc())
        .all()
    )
    return [_comment_out(c) for c in rows]


@router.post("/content/{content_type}/{content_id}/comments", response_model=CommentOut, status_code=201)
def add_comment(
    payload: CommentIn,
    content_type: str = Path(...),
    content_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    get_content_or_404(db, content_type, content_id)
    comment = Comment(user_id=current.id, content_type=content_type, content_id=content_id, text=payload.text)
    db.add(comment)
    _commit(db, "comment")
    db.refresh(comment)
    return _comment_out(comment)


# -------------------- reviews -------------------- #

@router.post("/ads/{ad_id}/reviews", response_model=ReviewOut, status_code=201)
def add_review(
    payload: ReviewIn,
    ad_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    """One review per user and ad."""
    if not db.query(Ad.id).filter(Ad.id == ad_id).first():
        raise HTTPException(status_code=404, detail="Content not found")

    already = db.query(Review.id).filter(Review.ad_id == ad_id, Review.user_id == current.id).first()
    if already:
        raise HTTPException(status_code=409, detail="You have already reviewed this ad")

    review = Review(user_id=current.id, ad_id=ad_id, rating=payload.rating, text=payload.text)
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already reviewed this ad")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not save review")
        raise HTTPException(status_code=503, detail="Could not save the review. Please try again later.")
    db.refresh(review)

    return ReviewOut(
        id=review.id,
        user_id=review.user_id,
        user=current.display_name or "You",
        rating=review.rating,
        text=review.text,
        created_at=review.created_at,
    )
