# usbest/api/v1/endpoints/surveys.py
from __future__ import annotations

from functools import partial
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from usbest.core.errors import ResultsUnavailable
from usbest.core.security import get_current_user
from usbest.db.session import get_db
from usbest.models.content import Survey
from usbest.models.profile import Profile
from usbest.schemas.surveys import (
    MySurveyResponseOut,
    SurveyAnswerIn,
    SurveyResultsOut,
    SurveySubmitIn,
    SurveySubmitOut,
)
from usbest.services.survey_flow import SurveyAnswerFlow, normalize_questions, selections_from_answers
from usbest.services.survey_records import get_answer_record, upsert_answer_record
from usbest.services.survey_results import default_sources, get_aggregate_results, question_breakdown

router = APIRouter(prefix="/surveys", tags=["surveys"])


@router.get("/{survey_id}/results", response_model=SurveyResultsOut)
def survey_results(
    survey_id: UUID = Path(...),
    breakdown: bool = Query(False, description="Add per-option votes and percentages in question order"),
    db: Session = Depends(get_db),
):
    """
    Aggregated votes. An unknown survey id reads as a survey without answers;
    503 only when neither the precomputed aggregate nor the raw answers load.
    """
    results = get_aggregate_results(survey_id, default_sources(db))
    out = SurveyResultsOut(survey_id=survey_id, results=results)
    if breakdown:
        survey = db.query(Survey).filter(Survey.id == survey_id).first()
        questions = normalize_questions(survey.questions) if survey else []
        out.breakdown = question_breakdown(results, questions)
    return out


@router.get("/{survey_id}/responses/me", response_model=MySurveyResponseOut)
def my_response(
    survey_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    row = get_answer_record(db, survey_id, current.id)
    answers = selections_from_answers(row.answers) if row else {}
    return MySurveyResponseOut(survey_id=survey_id, submitted=bool(answers), answers=answers)


@router.post("/{survey_id}/responses", response_model=SurveySubmitOut, status_code=201)
def submit_response(
    payload: SurveySubmitIn,
    survey_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current: Profile = Depends(get_current_user),
):
    survey = db.query(Survey).filter(Survey.id == survey_id).first()
    if not survey:
        raise HTTPException(status_code=404, detail="Survey not found")

    questions = normalize_questions(survey.questions)
    if not questions:
        raise HTTPException(status_code=400, detail="This survey has no questions yet")

    flow = SurveyAnswerFlow(
        questions,
        write_answers=partial(upsert_answer_record, db, survey.id, current.id),
        load_results=lambda: get_aggregate_results(survey.id, default_sources(db)),
    )
    existing = get_answer_record(db, survey.id, current.id)
    if existing:
        flow.restore(existing.answers)

    for question, answer in payload.as_selections().items():
        flow.select(question, answer)

    results, results_error = None, None
    try:
        results = flow.submit()
    except ResultsUnavailable as exc:
        results_error = exc.message

    return SurveySubmitOut(
        survey_id=survey.id,
        state=flow.state.value,
        answers=[SurveyAnswerIn(**a) for a in flow.answers_payload()],
        results=results,
        results_error=results_error,
    )
