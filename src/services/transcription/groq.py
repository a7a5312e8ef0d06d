"""Groq speech-to-text provider.

Uploads a WAV file to Groq's OpenAI-compatible
``/audio/transcriptions`` endpoint and returns the plain-text transcript.
"""

import asyncio
import logging
from pathlib import Path

import httpx

from src.core.config import get_settings
from src.core.exceptions import ConfigurationError, TranscriptionError
from src.core.models import TranscriptionResult
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class GroqSTT(BaseSTT):
    """Hosted Whisper transcription via the Groq API.

    Args:
        api_key: Groq API key (falls back to settings).
        model: Transcription model name.
        base_url: API root, e.g. ``https://api.groq.com/openai/v1``.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used in tests).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.groq_api_key
        if not self._api_key:
            raise ConfigurationError("Groq API key is not configured on the server")
        self._model = model or settings.groq_stt_model
        self._base_url = (base_url or settings.groq_base_url).rstrip("/")
        self._timeout = timeout or settings.request_timeout
        self._transport = transport

    async def transcribe(self, audio_path: str, **kwargs) -> dict:
        """Transcribe a WAV file.

        Returns:
            Dict with text, language, duration. ``text`` may be empty when
            the clip contains no speech.

        Raises:
            TranscriptionError: On network failure or a non-2xx response.
        """
        audio_bytes = await asyncio.to_thread(Path(audio_path).read_bytes)
        data = {"model": self._model, "response_format": "text"}
        if kwargs.get("language"):
            data["language"] = kwargs["language"]

        logger.info("Transcribing %d bytes with model %s", len(audio_bytes), self._model)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/audio/transcriptions",
                    data=data,
                    files={"file": ("audio.wav", audio_bytes, "audio/wav")},
                )
        except httpx.HTTPError as exc:
            raise TranscriptionError(detail=f"Transcription request failed: {exc}") from exc

        if response.is_error:
            raise TranscriptionError(
                detail=f"Transcription failed with status: {response.status_code}"
            )

        result = TranscriptionResult(
            text=response.text.strip(),
            language=kwargs.get("language") or "en",
        )
        return result.model_dump()
