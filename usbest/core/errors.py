# usbest/core/errors.py
from __future__ import annotations


class UsBestError(Exception):
    """Base for domain errors that the API maps to HTTP responses."""

    status_code = 500
    message = "Unexpected error"

    def __init__(self, message: str | None = None, *, details: list[str] | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details or []


class AggregateUnavailable(UsBestError):
    """Precomputed aggregate failed or came back empty. Recovered internally."""

    status_code = 503
    message = "Precomputed survey aggregate unavailable"


class ResultsUnavailable(UsBestError):
    status_code = 503
    message = "Could not load survey results. Please try again later."


class ValidationFailed(UsBestError):
    status_code = 422
    message = "Please answer every question."


class SubmissionFailed(UsBestError):
    status_code = 503
    message = "Could not submit your answers. Please try again later."


class AlreadySubmitted(UsBestError):
    status_code = 409
    message = "You have already answered this survey."
