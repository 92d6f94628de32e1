# usbest/services/survey_flow.py
from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Mapping, Sequence

from usbest.core.errors import AlreadySubmitted, SubmissionFailed, ValidationFailed
from usbest.schemas.surveys import SurveyResultsState

logger = logging.getLogger(__name__)


def normalize_questions(raw: Any) -> list[dict[str, Any]]:
    """
    Survey definition as stored -> [{"question": str, "options": [str]}].
    Blank questions are dropped; options are trimmed and blanks removed.
    """
    if not isinstance(raw, (list, tuple)):
        return []
    questions = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        question = item.get("question")
        question = question.strip() if isinstance(question, str) else ""
        if not question:
            continue
        options = item.get("options")
        options = [
            o.strip() for o in (options if isinstance(options, (list, tuple)) else [])
            if isinstance(o, str) and o.strip()
        ]
        questions.append({"question": question, "options": options})
    return questions


def selections_from_answers(stored_answers: Any) -> dict[str, str]:
    """Stored [{"question", "answer"}] pairs -> {question: answer}."""
    selections = {}
    if isinstance(stored_answers, (list, tuple)):
        for entry in stored_answers:
            if isinstance(entry, Mapping) and entry.get("question") and entry.get("answer"):
                selections[entry["question"]] = entry["answer"]
    return selections


class SubmissionState(str, enum.Enum):
    NOT_SUBMITTED = "not_submitted"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class SurveyAnswerFlow:
    """
    One respondent's pass through a survey:
    NOT_SUBMITTED -> SUBMITTING -> SUBMITTED, with results_loading set only
    while SUBMITTED and a results fetch is in flight. SUBMITTED is terminal.
    """

    def __init__(
        self,
        questions: Sequence[Mapping[str, Any]],
        *,
        write_answers: Callable[[list[dict[str, str]]], Any],
        load_results: Callable[[], SurveyResultsState],
    ):
        self.questions = list(questions)
        self.write_answers = write_answers
        self.load_results = load_results
        self.selections: dict[str, str] = {}
        self.state = SubmissionState.NOT_SUBMITTED
        self.results_loading = False
        self.results: SurveyResultsState | None = None

    # ---- selection ----

    def restore(self, stored_answers: Any) -> bool:
        """Rebuilds selections from a stored record; a restored flow is SUBMITTED."""
        restored = selections_from_answers(stored_answers)
        if not restored:
            return False
        self.selections = restored
        self.state = SubmissionState.SUBMITTED
        return True

    def select(self, question: str, option: str) -> None:
        if self.state is not SubmissionState.NOT_SUBMITTED:
            raise AlreadySubmitted()
        self.selections[question] = option

    def unanswered(self) -> list[str]:
        return [q["question"] for q in self.questions if not self.selections.get(q["question"])]

    def invalid_choices(self) -> list[str]:
        invalid = []
        for q in self.questions:
            choice = self.selections.get(q["question"])
            if choice and q.get("options") and choice not in q["options"]:
                invalid.append(q["question"])
        return invalid

    def answers_payload(self) -> list[dict[str, str]]:
        return [
            {"question": q["question"], "answer": self.selections[q["question"]]}
            for q in self.questions
        ]

    # ---- transitions ----

    def submit(self) -> SurveyResultsState:
        """
        Writes the answers and loads results. Raises ValidationFailed (no
        write, state unchanged) or SubmissionFailed (back to NOT_SUBMITTED,
        selections kept). ResultsUnavailable from the follow-up fetch leaves
        the flow SUBMITTED.
        """
        if self.state is not SubmissionState.NOT_SUBMITTED:
            raise AlreadySubmitted()

        missing = self.unanswered()
        if missing:
            raise ValidationFailed(details=missing)
        invalid = self.invalid_choices()
        if invalid:
            raise ValidationFailed("Some answers are not options of their question.", details=invalid)

        self.state = SubmissionState.SUBMITTING
        try:
            self.write_answers(self.answers_payload())
        except Exception as exc:
            logger.error("Survey answer write failed: %s", exc)
            self.state = SubmissionState.NOT_SUBMITTED
            raise SubmissionFailed() from exc

        self.state = SubmissionState.SUBMITTED
        return self.refresh_results()

    def refresh_results(self) -> SurveyResultsState:
        if self.state is not SubmissionState.SUBMITTED:
            raise ValidationFailed("Results are shown after answering.")
        self.results_loading = True
        try:
            self.results = self.load_results()
        finally:
            self.results_loading = False
        return self.results
