"""Local speech-to-text with faster-whisper.

For deployments without a Groq key. Dictated posts are short English
clips, so decoding defaults to English with voice-activity filtering;
a clip with no speech yields an empty transcript, which the pipeline
reports as insufficient information.
"""

import asyncio
import logging
from functools import lru_cache
from pathlib import Path

from faster_whisper import WhisperModel

from src.core.config import get_settings
from src.core.exceptions import TranscriptionError
from src.core.models import TranscriptionResult
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


@lru_cache(maxsize=2)
def load_model(size: str, device: str, compute_type: str) -> WhisperModel:
    """Load a model once per (size, device, compute_type)."""
    logger.info("Loading Whisper model %s on %s (%s)", size, device, compute_type)
    return WhisperModel(size, device=device, compute_type=compute_type)


def _decode(model: WhisperModel, audio_path: str, language: str | None) -> TranscriptionResult:
    # Segments are a lazy generator; consume them on the worker thread.
    segments, info = model.transcribe(
        audio_path,
        language=language,
        beam_size=5,
        vad_filter=True,
        condition_on_previous_text=False,
    )
    text = " ".join(part for part in (seg.text.strip() for seg in segments) if part)
    return TranscriptionResult(
        text=text,
        language=info.language or language or "unknown",
        duration=info.duration,
    )


class WhisperSTT(BaseSTT):
    """In-process Whisper transcription of recorded clips."""

    def __init__(
        self,
        model_size: str | None = None,
        device: str = "cpu",
        compute_type: str = "int8",
        language: str | None = "en",
    ) -> None:
        self._model_size = model_size or get_settings().whisper_model
        self._device = device
        self._compute_type = compute_type
        self._language = language

    async def transcribe(self, audio_path: str, **kwargs) -> dict:
        if not Path(audio_path).is_file():
            raise TranscriptionError(detail=f"Audio file not found: {audio_path}")
        language = kwargs.get("language", self._language)

        try:
            model = await asyncio.to_thread(
                load_model, self._model_size, self._device, self._compute_type
            )
            result = await asyncio.to_thread(_decode, model, audio_path, language)
        except Exception as exc:
            logger.error("Whisper transcription failed for %s: %s", audio_path, exc)
            raise TranscriptionError(detail="Local transcription failed") from exc

        logger.info("Transcribed %.1fs of audio locally", result.duration)
        return result.model_dump()
