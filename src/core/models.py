"""
Pydantic v2 request / response models used across the API layer.

Post       — stored record, create / update bodies
Extraction — partial post produced by the language-model step
Misc       — health, transcription, error envelope
"""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Post
# ---------------------------------------------------------------------------


class PostKind(StrEnum):
    """Offer/Request discriminator, serialized as ``type`` on the wire."""

    offer = "Offer"
    request = "Request"


# Locations offered by the creation form.
LOCATIONS = ("Boston", "Cambridge")


class PostCreate(BaseModel):
    """POST /posts request body (a post minus id and date)."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    type: PostKind
    author: str = Field(min_length=1)
    location: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: str = ""


class PostUpdate(BaseModel):
    """PUT /posts/{id} request body. Only fields that are sent get merged."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1)
    type: PostKind | None = None
    author: str | None = None
    location: str | None = None
    category: str | None = None
    description: str | None = None


class Post(BaseModel):
    """A single offer or request shown in the community feed.

    Records written by older versions may lack the free-text fields, so
    those default to empty strings. New posts always go through
    ``PostCreate``, which requires them.
    """

    id: int
    title: str
    type: PostKind
    author: str = ""
    location: str = ""
    description: str = ""
    category: str = ""
    date: date


class DeletePostResponse(BaseModel):
    """DELETE /posts/{id} response."""

    message: str = "Post deleted successfully"


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

# Content fields the extraction step asks the model for.
EXTRACTION_FIELDS = ("title", "description", "location", "category", "author")


class ExtractionResult(BaseModel):
    """Structured fields parsed from a voice transcript.

    Every content field is optional; ``type`` is stamped by the extractor
    and must be a valid kind. Unknown keys from the model are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    location: str | None = None
    category: str | None = None
    author: str | None = None
    type: PostKind


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionResult(BaseModel):
    """Complete transcription result from a file."""

    text: str
    language: str = "unknown"
    duration: float = 0.0


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    error: str
    type: str
    timestamp: str
    missingFields: list[str] | None = None  # noqa: N815
    details: list[dict] | None = None
