"""
Failure classification.

Two levels of failure exist:
- Per-card failures (LookupFailure) stay attached to that card and become
  a placeholder slot. They never abort a batch.
- Request failures (KnownError subclasses) abort the whole request and are
  turned into a JSON error response by the API layer.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of request-level failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Output failures
    RENDER_FAILED = "render_failed"

    # Unknown
    UNKNOWN = "unknown"


class LookupFailure(str, Enum):
    """Why a single card has no image. Rendered identically as a placeholder."""

    NOT_FOUND = "Card not found"
    NO_IMAGE = "No image available"
    FETCH_FAILED = "Failed to fetch"
    TIMED_OUT = "Timed out"


class ErrorResponse(BaseModel):
    """Error body returned instead of a document."""

    error: str = Field(
        ...,
        description="Human-readable explanation of what went wrong",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to an ErrorResponse."""
        return ErrorResponse(error=self.message)


class NoCardsError(KnownError):
    """The request carried no usable card entries."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message="No cards provided",
            status_code=400,
        )


class TooManyCardsError(KnownError):
    """The list expands to more cards than one request may print."""

    def __init__(self, total: int, limit: int) -> None:
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Too many cards: {total} requested, at most {limit} per PDF",
            status_code=400,
        )
        self.total = total
        self.limit = limit


class RenderError(KnownError):
    """The PDF could not be drawn."""

    def __init__(self, message: str) -> None:
        super().__init__(
            kind=FailureKind.RENDER_FAILED,
            message=message,
            status_code=500,
        )
