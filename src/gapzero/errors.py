"""Exceptions that reach the caller, each with a short, actionable message."""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = (
    "Something went wrong during the analysis. Please try again. "
    "If the problem persists, your CV might be in an unsupported format."
)


class GapZeroError(Exception):
    """Base class for errors that carry a user-facing message and HTTP status."""

    status_code: int = 500
    title: str = "Analysis failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or GENERIC_ERROR_MESSAGE)

    @property
    def message(self) -> str:
        return str(self)


class InvalidRequestError(GapZeroError):
    status_code = 400
    title = "Invalid request"


class DocumentTooLargeError(GapZeroError):
    status_code = 413
    title = "File too large"


class UnsupportedDocumentError(GapZeroError):
    status_code = 415
    title = "Invalid file type"


class UnreadableDocumentError(GapZeroError):
    status_code = 422
    title = "Unreadable PDF"


class AIServiceUnavailableError(GapZeroError):
    status_code = 503
    title = "Service unavailable"


class AnalysisTimeoutError(GapZeroError):
    status_code = 504
    title = "Timeout"


class ATSScoringError(GapZeroError):
    """Keyword matching produced nothing usable."""

    title = "ATS scoring failed"


class NoKeywordsError(ATSScoringError):
    status_code = 400
    title = "No keywords found"


def user_message(exc: BaseException) -> str:
    """Return the message safe to show for *exc*; raw details stay in the logs."""
    if isinstance(exc, GapZeroError):
        return exc.message
    return GENERIC_ERROR_MESSAGE
