# usbest/models/engagement.py
import uuid

from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Uuid, UniqueConstraint, CheckConstraint, func
)
from sqlalchemy.orm import relationship

from usbest.db.base_class import Base


class Like(Base):
    __tablename__ = "likes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content_type = Column(String(16), nullable=False)  # ad | remix | survey
    content_id = Column(Uuid, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "content_type", "content_id", name="uq_like_once"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    content_type = Column(String(16), nullable=False)
    content_id = Column(Uuid, nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    ad_id = Column(Uuid, ForeignKey("ads.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    ad = relationship("Ad", back_populates="reviews")
    profile = relationship("Profile")

    __table_args__ = (
        UniqueConstraint("ad_id", "user_id", name="uq_review_per_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )
