# usbest/api/v1/endpoints/posts.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from usbest.core.security import get_current_user
from usbest.db.session import get_db
from usbest.models.content import Ad, Remix, Survey
from usbest.models.profile import Profile
from usbest.schemas.content import AdCreateIn, CreatedOut, RemixCreateIn, SurveyCreateIn

router = APIRouter(tags=["posts"])
logger = logging.getLogger(__name__)


def _save(db: Session, item, content_type: str) -> CreatedOut:
    db.add(item)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not save %s", content_type)
        raise HTTPException(status_code=503, detail="Could not publish the post. Please try again later.")
    db.refresh(item)
    logger.info("User %s published %s %s", item.user_id, content_type, item.id)
    return CreatedOut(id=item.id, content_type=content_type, created_at=item.created_at)


@router.post("/ads", response_model=CreatedOut, status_code=201)
def create_ad(
    payload: AdCreateIn,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    ad = Ad(
        user_id=current.id,
        title=payload.title,
        description=payload.description,
        brand=(payload.brand or "").strip() or None,
        media_url=payload.media_url,
        shop_url=payload.shop_url,
    )
    return _save(db, ad, "ad")


@router.post("/remixes", response_model=CreatedOut, status_code=201)
def create_remix(
    payload: RemixCreateIn,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    if payload.ad_id and not db.query(Ad.id).filter(Ad.id == payload.ad_id).first():
        raise HTTPException(status_code=400, detail="The remixed ad does not exist")

    remix = Remix(
        user_id=current.id,
        ad_id=payload.ad_id,
        title=payload.title,
        description=payload.description,
        media_url=payload.media_url,
    )
    return _save(db, remix, "remix")


@router.post("/surveys", response_model=CreatedOut, status_code=201)
def create_survey(
    payload: SurveyCreateIn,
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    survey = Survey(
        user_id=current.id,
        title=payload.title,
        description=payload.description,
        brand=(payload.brand or "").strip() or None,
        media_url=payload.media_url,
        questions=[q.model_dump() for q in payload.questions],
    )
    return _save(db, survey, "survey")
