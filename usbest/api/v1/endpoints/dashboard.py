# usbest/api/v1/endpoints/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from usbest.core.security import get_current_user
from usbest.db.session import get_db
from usbest.models.content import Ad, Remix, Survey
from usbest.models.profile import Profile
from usbest.schemas.dashboard import DashboardOut, RecentPostOut
from usbest.services.content import engagement_for

router = APIRouter(tags=["dashboard"])

RECENT_POSTS = 5


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    """Engagement over every post of the current user, plus the five newest."""
    posts = []
    for content_type, model in (("ad", Ad), ("remix", Remix), ("survey", Survey)):
        rows = (
            db.query(model.id, model.title, model.created_at)
            .filter(model.user_id == current.id)
            .all()
        )
        posts.extend((content_type, r) for r in rows)
    posts.sort(key=lambda pair: pair[1].created_at, reverse=True)

    counts = engagement_for(db, [(ctype, r.id) for ctype, r in posts])
    total_likes = sum(c["likes"] for c in counts.values())
    total_comments = sum(c["comments"] for c in counts.values())
    total_posts = len(posts)

    recent = [
        RecentPostOut(
            id=r.id,
            title=r.title,
            content_type=ctype,
            likes=counts[(ctype, r.id)]["likes"],
            comments=counts[(ctype, r.id)]["comments"],
            created_at=r.created_at,
        )
        for ctype, r in posts[:RECENT_POSTS]
    ]

    return DashboardOut(
        total_posts=total_posts,
        total_likes=total_likes,
        total_comments=total_comments,
        likes_per_post=round(total_likes / total_posts, 1) if total_posts else 0.0,
        comments_per_post=round(total_comments / total_posts, 1) if total_posts else 0.0,
        recent_posts=recent,
    )
