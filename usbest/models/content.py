# usbest/models/content.py
import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from usbest.db.base_class import Base
from usbest.models.types import JSONType


class Ad(Base):
    __tablename__ = "ads"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    brand = Column(String, nullable=True)
    media_url = Column(String, nullable=True)
    shop_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    profile = relationship("Profile")
    reviews = relationship("Review", back_populates="ad", cascade="all, delete-orphan")


class Remix(Base):
    __tablename__ = "remixes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    ad_id = Column(Uuid, ForeignKey("ads.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    media_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    profile = relationship("Profile")
    ad = relationship("Ad")


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    brand = Column(String, nullable=True)
    media_url = Column(String, nullable=True)
    questions = Column(JSONType, nullable=False, default=list)  # [{"question": str, "options": [str]}]
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    profile = relationship("Profile")
