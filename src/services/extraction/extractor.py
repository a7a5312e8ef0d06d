"""
Transcript-to-post extraction service.

Sends a voice transcript to the configured LLM with a kind-specific
instruction, parses the JSON reply and validates it against
:class:`ExtractionResult`. Each request gets up to ``max_attempts``
attempts; a model-reported lack of information aborts immediately.
"""

import json
import logging
import time

from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_not_exception_type,
    stop_after_attempt,
)

from src.core.exceptions import (
    CommItError,
    ConfigurationError,
    ExtractionError,
    InsufficientInfoError,
    InvalidFormatError,
)
from src.core.models import EXTRACTION_FIELDS, ExtractionResult, PostKind
from src.core.utils import strip_code_fences
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

MISSING_FIELDS_KEY = "missing_fields"


class MalformedOutputError(ValueError):
    """The model reply was not a single JSON object."""


def build_system_prompt(kind: PostKind) -> str:
    """Return the extraction instruction for an Offer or a Request."""
    noun = kind.value.lower()
    subject = "what is being offered" if kind is PostKind.offer else "what is being requested"
    return (
        "You are a helpful assistant that extracts structured data from text.\n"
        "Parse the user's input and extract the following fields for a community "
        f"{noun} posting:\n"
        f"- title: A concise title for the {noun} (required)\n"
        f"- description: A detailed description of {subject} (optional)\n"
        '- location: The location (default to "Boston" if not specified)\n'
        f"- category: The category of the {noun} (e.g., Education, Services, etc.)\n"
        f"- author: The name of the person making the {noun} "
        '(use "Anonymous" if not specified)\n\n'
        "IMPORTANT: If the input does not contain explicit information about some fields:\n"
        "1. For description: leave it as an empty string if not provided\n"
        "2. For category: intelligently infer a suitable category based on the overall content\n"
        "3. For other fields: use reasonable default values\n\n"
        f'Only include a field in the "{MISSING_FIELDS_KEY}" array if it is a required field '
        "(title, location, author) AND there is absolutely no way to infer it from the context.\n\n"
        "Format your response as valid JSON with these exact fields plus an additional "
        f'"{MISSING_FIELDS_KEY}" array.'
    )


def parse_model_output(raw: str, kind: PostKind) -> ExtractionResult:
    """Turn one raw model reply into a validated extraction result.

    Raises:
        json.JSONDecodeError: The reply is not JSON.
        MalformedOutputError: The reply is JSON but not an object.
        InsufficientInfoError: The model listed required fields it could not infer.
        ValidationError: The object does not match the extraction schema.
    """
    data = json.loads(strip_code_fences(raw))
    if not isinstance(data, dict):
        raise MalformedOutputError(f"Expected a JSON object, got {type(data).__name__}")

    missing = data.pop(MISSING_FIELDS_KEY, None)
    if isinstance(missing, list) and missing:
        raise InsufficientInfoError(missing_fields=[str(f) for f in missing])

    for field in EXTRACTION_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and not value.strip():
            data.pop(field)

    data["type"] = kind.value
    return ExtractionResult.model_validate(data)


def _validation_details(exc: ValidationError) -> list[dict]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


class PostExtractor:
    """Extracts post fields from a transcript using an LLM provider.

    Args:
        llm: Provider implementing ``BaseLLM``.
        max_attempts: Total attempts per request (first try included).
    """

    def __init__(self, llm: BaseLLM, max_attempts: int = 3) -> None:
        self._llm = llm
        self._max_attempts = max_attempts

    def _log_failed_attempt(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Extraction attempt %d/%d failed after %.2fs: %r",
            retry_state.attempt_number,
            self._max_attempts,
            retry_state.seconds_since_start or 0.0,
            exc,
        )

    async def _attempt(self, transcript: str, kind: PostKind, attempt: int) -> ExtractionResult:
        started = time.perf_counter()
        logger.info("Extraction attempt %d/%d started", attempt, self._max_attempts)
        raw = await self._llm.generate(
            transcript,
            system=build_system_prompt(kind),
            temperature=0.2,
            json_mode=True,
        )
        logger.info(
            "Extraction attempt %d completed in %.2fs; raw response: %s",
            attempt,
            time.perf_counter() - started,
            raw[:200],
        )
        return parse_model_output(raw, kind)

    async def extract(self, transcript: str, kind: PostKind) -> ExtractionResult:
        """Extract structured post fields from *transcript*.

        Returns:
            The validated result of the first successful attempt.

        Raises:
            InsufficientInfoError: The model could not infer required fields (no retry).
            InvalidFormatError: The last attempt produced output of the wrong shape.
            ExtractionError: The last attempt failed for any other reason.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            retry=retry_if_not_exception_type((InsufficientInfoError, ConfigurationError)),
            after=self._log_failed_attempt,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._attempt(
                        transcript, kind, attempt.retry_state.attempt_number
                    )
        except InsufficientInfoError as exc:
            logger.info("Missing fields reported, not retrying: %s", exc.missing_fields)
            raise
        except ValidationError as exc:
            logger.error("All %d extraction attempts failed validation", self._max_attempts)
            raise InvalidFormatError(details=_validation_details(exc)) from exc
        except (json.JSONDecodeError, MalformedOutputError) as exc:
            logger.error("All %d extraction attempts returned malformed JSON", self._max_attempts)
            raise InvalidFormatError(
                details=[{"loc": [], "msg": str(exc), "type": "json_invalid"}]
            ) from exc
        except CommItError:
            raise
        except Exception as exc:
            logger.error("All %d extraction attempts failed: %s", self._max_attempts, exc)
            raise ExtractionError() from exc

        logger.info("Extracted structured data for %s", kind.value)
        return result
