# usbest/models/survey_response.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Uuid, UniqueConstraint, func

from usbest.db.base_class import Base
from usbest.models.types import JSONType


class SurveyResponse(Base):
    """One respondent's answers to one survey. Upserted on (survey_id, user_id)."""

    __tablename__ = "survey_responses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    survey_id = Column(Uuid, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    answers = Column(JSONType, nullable=False, default=list)  # [{"question": str, "answer": str}]
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("survey_id", "user_id", name="uq_survey_response_per_user"),
    )
