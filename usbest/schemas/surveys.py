# usbest/schemas/surveys.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ---------- Aggregator inputs ----------

class SurveyResultRow(TypedDict, total=False):
    """One flattened row of get_survey_results(p_survey_id)."""
    question: Optional[str]
    option: Optional[str]
    vote_count: Any
    total_votes: Any


# ---------- Aggregator output ----------

class QuestionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_votes: int = Field(0, alias="totalVotes", ge=0)
    options: Dict[str, int] = Field(default_factory=dict)


class SurveyResultsState(BaseModel):
    """Serialized with the camelCase keys the feed and detail views read."""
    model_config = ConfigDict(populate_by_name=True)

    total_responses: int = Field(0, alias="totalResponses", ge=0)
    question_results: Dict[str, QuestionResult] = Field(default_factory=dict, alias="questionResults")


# ---------- Display breakdown ----------

class OptionBreakdown(BaseModel):
    option: str
    votes: int
    percentage: int


class QuestionBreakdown(BaseModel):
    question: str
    total_votes: int
    options: List[OptionBreakdown] = Field(default_factory=list)


class SurveyResultsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    survey_id: UUID
    results: SurveyResultsState
    breakdown: Optional[List[QuestionBreakdown]] = None


# ---------- Submission ----------

class SurveyAnswerIn(BaseModel):
    question: str
    answer: str


class SurveySubmitIn(BaseModel):
    answers: List[SurveyAnswerIn] = Field(default_factory=list)

    def as_selections(self) -> dict[str, str]:
        return {a.question.strip(): a.answer.strip() for a in self.answers}


class SurveySubmitOut(BaseModel):
    survey_id: UUID
    state: str
    answers: List[SurveyAnswerIn]
    results: Optional[SurveyResultsState] = None
    results_error: Optional[str] = None


class MySurveyResponseOut(BaseModel):
    survey_id: UUID
    submitted: bool
    answers: Dict[str, str] = Field(default_factory=dict)
