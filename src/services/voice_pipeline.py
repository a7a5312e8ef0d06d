"""
Voice-to-post pipeline.

Writes an uploaded audio clip to a temporary WAV file, transcribes it,
and hands the transcript to :class:`PostExtractor`. The temporary file
is removed whatever the outcome.
"""

import asyncio
import logging
import os
import tempfile
import time
from pathlib import Path

from src.core.config import Settings, get_settings
from src.core.exceptions import InsufficientInfoError
from src.core.models import ExtractionResult, PostKind
from src.services.extraction import PostExtractor
from src.services.llm import create_llm
from src.services.transcription import BaseSTT, create_stt

logger = logging.getLogger(__name__)


def _write_temp_audio(audio_bytes: bytes) -> Path:
    fd, name = tempfile.mkstemp(prefix="recording-", suffix=".wav")
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(audio_bytes)
    except Exception:
        path.unlink(missing_ok=True)
        raise
    return path


def _remove_temp_audio(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.exception("Error deleting temp file %s", path)


class VoicePostPipeline:
    """Transcribe-then-extract pipeline for dictated posts.

    Args:
        stt: Speech-to-text provider.
        extractor: Transcript parser.
    """

    def __init__(self, stt: BaseSTT, extractor: PostExtractor) -> None:
        self._stt = stt
        self._extractor = extractor

    async def process(self, audio_bytes: bytes, kind: PostKind) -> ExtractionResult:
        """Run the full pipeline on one recorded clip.

        Raises:
            InsufficientInfoError: No speech was detected, or the model
                could not infer required fields.
            TranscriptionError: The speech-to-text call failed.
            InvalidFormatError / ExtractionError: See :meth:`PostExtractor.extract`.
        """
        started = time.perf_counter()
        stt_seconds = 0.0
        transcript = ""
        temp_path = await asyncio.to_thread(_write_temp_audio, audio_bytes)
        try:
            stt_started = time.perf_counter()
            result = await self._stt.transcribe(str(temp_path))
            stt_seconds = time.perf_counter() - stt_started

            transcript = (result.get("text") or "").strip()
            if not transcript:
                raise InsufficientInfoError(detail="No speech detected in the audio")
            logger.info("Transcript: %r", transcript[:500])

            llm_started = time.perf_counter()
            extracted = await self._extractor.extract(transcript, kind)
            logger.info(
                "Performance (%s): transcription=%.2fs llm=%.2fs total=%.2fs",
                kind.value,
                stt_seconds,
                time.perf_counter() - llm_started,
                time.perf_counter() - started,
            )
            return extracted
        except Exception:
            logger.info(
                "Pipeline failed (%s) after %.2fs; transcription=%.2fs transcript=%r",
                kind.value,
                time.perf_counter() - started,
                stt_seconds,
                transcript[:200],
            )
            raise
        finally:
            await asyncio.to_thread(_remove_temp_audio, temp_path)


def create_pipeline(settings: Settings | None = None) -> VoicePostPipeline:
    """Build a pipeline from the configured providers.

    Raises:
        ConfigurationError: A provider is unknown or lacks credentials.
    """
    settings = settings or get_settings()
    stt = create_stt(settings.stt_provider)
    llm = create_llm(settings.llm_provider)
    extractor = PostExtractor(llm, max_attempts=settings.extraction_max_attempts)
    return VoicePostPipeline(stt, extractor)
