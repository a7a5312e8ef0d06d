"""
Comm-It exception hierarchy.

All application-specific exceptions inherit from CommItError,
enabling centralized error handling in the API middleware layer.
The ``code`` of each error is the kind tag the UI switches on.
"""

from datetime import UTC, datetime
from typing import Any


class CommItError(Exception):
    """Base exception for all Comm-It errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SERVER_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)

    def extra(self) -> dict[str, Any]:
        """Additional envelope fields for this error kind."""
        return {}


class PostNotFoundError(CommItError):
    """Raised when a post ID does not exist."""

    def __init__(self, post_id: int | str) -> None:
        super().__init__(
            detail=f"Post not found: {post_id}",
            code="NOT_FOUND",
            status_code=404,
        )


class BadRequestError(CommItError):
    """Raised for malformed client input outside of body validation."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="BAD_REQUEST", status_code=400)


class ConfigurationError(CommItError):
    """Raised when a required setting (API key, provider name) is missing."""

    def __init__(self, detail: str = "Server is not configured") -> None:
        super().__init__(detail=detail, code="SERVER_ERROR", status_code=500)


class TranscriptionError(CommItError):
    """Raised when the speech-to-text call fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(detail=detail, code="API_ERROR", status_code=500)


class ExtractionError(CommItError):
    """Raised when the LLM call fails after all retries."""

    def __init__(self, detail: str = "Failed to process audio with the language model") -> None:
        super().__init__(detail=detail, code="API_ERROR", status_code=500)


class InsufficientInfoError(CommItError):
    """Raised when the input carries no usable information.

    Either the transcript is empty (silent audio) or the model reported
    required fields it could not infer.
    """

    def __init__(
        self,
        detail: str = "Not enough information provided in the audio",
        missing_fields: list[str] | None = None,
    ) -> None:
        self.missing_fields = missing_fields or []
        super().__init__(detail=detail, code="INSUFFICIENT_INFO", status_code=422)

    def extra(self) -> dict[str, Any]:
        if self.missing_fields:
            return {"missingFields": self.missing_fields}
        return {}


class InvalidFormatError(CommItError):
    """Raised when the model output never matched the extraction schema."""

    def __init__(
        self,
        detail: str = "The extracted data does not match the required format",
        details: list[dict] | None = None,
    ) -> None:
        self.details = details or []
        super().__init__(detail=detail, code="INVALID_FORMAT", status_code=422)

    def extra(self) -> dict[str, Any]:
        return {"details": self.details}
