# usbest/services/survey_records.py
"""
Database access behind the survey aggregator: the precomputed aggregate
function, the raw answer rows and the per-user upsert.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from usbest.core.config import settings
from usbest.models.survey_response import SurveyResponse

logger = logging.getLogger(__name__)

PRECOMPUTED_SQL = text("""
    SELECT r.question, r.option, r.vote_count, r.total_votes
    FROM get_survey_results(:p_survey_id) AS r
""")


def _apply_statement_timeout(db: Session) -> None:
    # SET LOCAL only lives until the end of the current transaction
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(text(f"SET LOCAL statement_timeout = {int(settings.RESULTS_TIMEOUT_MS)}"))


def fetch_precomputed_aggregate(db: Session, survey_id: UUID) -> list[dict[str, Any]]:
    """
    Rows of get_survey_results(p_survey_id). Errors are re-raised after a
    rollback, so the same session can still run the fallback query.
    """
    try:
        _apply_statement_timeout(db)
        rows = db.execute(PRECOMPUTED_SQL, {"p_survey_id": str(survey_id)}).mappings().all()
    except SQLAlchemyError:
        db.rollback()
        raise
    return [dict(r) for r in rows]


def fetch_raw_answer_records(db: Session, survey_id: UUID) -> list[Any]:
    """The `answers` payload of every response to the survey."""
    try:
        _apply_statement_timeout(db)
        rows = (
            db.query(SurveyResponse.answers)
            .filter(SurveyResponse.survey_id == survey_id)
            .all()
        )
    except SQLAlchemyError:
        db.rollback()
        raise
    return [answers for (answers,) in rows]


def get_answer_record(db: Session, survey_id: UUID, user_id: UUID) -> SurveyResponse | None:
    return (
        db.query(SurveyResponse)
        .filter(SurveyResponse.survey_id == survey_id, SurveyResponse.user_id == user_id)
        .first()
    )


def _write_answers(db: Session, survey_id: UUID, user_id: UUID, payload: list[dict[str, str]]) -> SurveyResponse:
    row = get_answer_record(db, survey_id, user_id)
    if row:
        row.answers = payload
    else:
        row = SurveyResponse(survey_id=survey_id, user_id=user_id, answers=payload)
        db.add(row)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    return row


def upsert_answer_record(
    db: Session,
    survey_id: UUID,
    user_id: UUID,
    answers: Sequence[dict[str, str]],
) -> SurveyResponse:
    """
    Insert or replace the user's answers for the survey (last write wins).
    A concurrent first insert from the same user surfaces as an IntegrityError
    and is retried once as an update.
    """
    payload = [dict(a) for a in answers]
    try:
        return _write_answers(db, survey_id, user_id, payload)
    except IntegrityError:
        logger.info("Concurrent answer insert for survey=%s user=%s, retrying as update", survey_id, user_id)
        return _write_answers(db, survey_id, user_id, payload)
