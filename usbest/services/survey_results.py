# usbest/services/survey_results.py
"""
Survey results aggregation.

Results come from an ordered chain of sources: the precomputed aggregate
(the get_survey_results database function) first, then a tally over the raw
answer rows. A source that cannot answer raises AggregateUnavailable and the
next one is tried; only when the chain runs out, or the raw rows themselves
cannot be read, does the caller get ResultsUnavailable.

Every call rebuilds its result from the source data; nothing is cached.
"""
from __future__ import annotations

import logging
import math
from functools import partial
from typing import Any, Callable, Iterable, Mapping, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from usbest.core.errors import AggregateUnavailable, ResultsUnavailable
from usbest.schemas.surveys import (
    OptionBreakdown,
    QuestionBreakdown,
    QuestionResult,
    SurveyResultRow,
    SurveyResultsState,
)
from usbest.services import survey_records

logger = logging.getLogger(__name__)


# -------------------- transforms -------------------- #

def create_empty_results() -> SurveyResultsState:
    return SurveyResultsState(total_responses=0, question_results={})


def _clean_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_count(value: Any) -> int:
    """Vote counts are rendered as bar widths: anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0
    return int(number)


def _build_state(total: int, tallies: dict[str, tuple[int, dict[str, int]]]) -> SurveyResultsState:
    return SurveyResultsState(
        total_responses=total,
        question_results={
            question: QuestionResult(total_votes=total_votes, options=options)
            for question, (total_votes, options) in tallies.items()
        },
    )


def transform_survey_results(rows: Sequence[Mapping[str, Any]] | None) -> SurveyResultsState:
    """
    Precomputed rows -> SurveyResultsState.

    The first row's total_votes is the survey total and the default
    denominator for every question; a row carrying a different total_votes
    overrides its question's denominator.
    """
    if not rows:
        return create_empty_results()

    total_responses = _as_count(rows[0].get("total_votes"))
    tallies: dict[str, tuple[int, dict[str, int]]] = {}

    for row in rows:
        question = _clean_text(row.get("question"))
        if not question:
            continue

        total_votes, options = tallies.get(question, (total_responses, {}))
        if row.get("total_votes") is not None:
            total_votes = _as_count(row.get("total_votes"))

        option = _clean_text(row.get("option"))
        if option:
            options[option] = _as_count(row.get("vote_count"))

        tallies[question] = (total_votes, options)

    return _build_state(total_responses, tallies)


def _answer_pairs(answers: Any) -> Iterable[tuple[Any, Any]]:
    # Only [{"question": ..., "answer": ...}] arrays carry votes, as in get_survey_results
    if isinstance(answers, (list, tuple)):
        return (
            (entry.get("question"), entry.get("answer"))
            for entry in answers
            if isinstance(entry, Mapping)
        )
    return ()


def aggregate_raw_answers(records: Sequence[Any] | None) -> SurveyResultsState:
    """
    Raw answer payloads -> SurveyResultsState.

    Every record counts toward every question's denominator, answered or not:
    totalVotes is the number of respondents to the survey.
    """
    if not records:
        return create_empty_results()

    total = len(records)
    counts: dict[str, dict[str, int]] = {}

    for answers in records:
        for raw_question, raw_option in _answer_pairs(answers):
            question = _clean_text(raw_question)
            option = _clean_text(raw_option)
            if not question or not option:
                continue
            options = counts.setdefault(question, {})
            options[option] = options.get(option, 0) + 1

    return _build_state(total, {q: (total, options) for q, options in counts.items()})


# -------------------- display helpers -------------------- #

def percentage(votes: int, total_votes: int) -> int:
    """round(votes / total * 100), half up; 0 when there is no denominator."""
    if total_votes <= 0:
        return 0
    return int(math.floor(votes / total_votes * 100 + 0.5))


def question_denominator(results: SurveyResultsState, question: str) -> int:
    result = results.question_results.get(question)
    total = result.total_votes if result else 0
    return total or results.total_responses


def question_breakdown(
    results: SurveyResultsState,
    questions: Sequence[Mapping[str, Any]],
) -> list[QuestionBreakdown]:
    """
    Votes and percentages per defined option, in the survey definition's
    order. Questions nobody answered still appear, with zero votes.
    """
    breakdown: list[QuestionBreakdown] = []
    for q in questions:
        question = _clean_text(q.get("question"))
        if not question:
            continue
        result = results.question_results.get(question)
        counted = result.options if result else {}
        total = question_denominator(results, question)
        options = [
            OptionBreakdown(
                option=option,
                votes=counted.get(option, 0),
                percentage=percentage(counted.get(option, 0), total),
            )
            for option in q.get("options") or []
        ]
        breakdown.append(QuestionBreakdown(question=question, total_votes=total, options=options))
    return breakdown


# -------------------- sources -------------------- #

class ResultsSource:
    """A way to obtain a survey's results. Raises AggregateUnavailable to pass."""

    name = "source"

    def load(self, survey_id: UUID) -> SurveyResultsState:
        raise NotImplementedError


class PrecomputedSource(ResultsSource):
    name = "precomputed"

    def __init__(self, fetch_rows: Callable[[UUID], Sequence[SurveyResultRow]]):
        self.fetch_rows = fetch_rows

    def load(self, survey_id: UUID) -> SurveyResultsState:
        try:
            rows = self.fetch_rows(survey_id)
        except Exception as exc:
            raise AggregateUnavailable(f"get_survey_results failed: {exc}") from exc
        if not rows:
            raise AggregateUnavailable("get_survey_results returned no rows")
        return transform_survey_results(rows)


class RawRecordSource(ResultsSource):
    name = "raw_records"

    def __init__(self, fetch_records: Callable[[UUID], Sequence[Any]]):
        self.fetch_records = fetch_records

    def load(self, survey_id: UUID) -> SurveyResultsState:
        try:
            records = self.fetch_records(survey_id)
        except Exception as exc:
            logger.error("Could not read answer records for survey %s: %s", survey_id, exc)
            raise ResultsUnavailable() from exc
        return aggregate_raw_answers(records)


def default_sources(db: Session) -> list[ResultsSource]:
    return [
        PrecomputedSource(partial(survey_records.fetch_precomputed_aggregate, db)),
        RawRecordSource(partial(survey_records.fetch_raw_answer_records, db)),
    ]


def get_aggregate_results(survey_id: UUID, sources: Sequence[ResultsSource]) -> SurveyResultsState:
    for source in sources:
        try:
            return source.load(survey_id)
        except AggregateUnavailable as exc:
            logger.warning("Survey %s: %s source unavailable (%s), falling back", survey_id, source.name, exc)
    raise ResultsUnavailable()
