"""Unit tests for the transcribe-then-extract voice pipeline."""

import errno
import os
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from src.core.exceptions import (
    ConfigurationError,
    InsufficientInfoError,
    TranscriptionError,
)
from src.core.models import PostKind
from src.services import voice_pipeline
from src.services.extraction import PostExtractor
from src.services.voice_pipeline import VoicePostPipeline, create_pipeline


@pytest.fixture
def pipeline(mock_stt, mock_llm):
    return VoicePostPipeline(mock_stt, PostExtractor(mock_llm))


def _temp_path_from(mock_stt) -> Path:
    return Path(mock_stt.transcribe.call_args.args[0])


class TestProcess:
    async def test_success(self, pipeline, mock_stt, mock_llm, sample_wav_bytes):
        result = await pipeline.process(sample_wav_bytes, PostKind.offer)

        assert result.title == "Free Guitar Lessons"
        assert result.type is PostKind.offer
        transcript = mock_llm.generate.call_args.args[0]
        assert transcript.startswith("Hi, I'm Jamie")

    async def test_temp_file_holds_upload_and_is_removed(
        self, pipeline, mock_stt, sample_wav_bytes
    ):
        seen = {}

        async def transcribe(path, **kwargs):
            seen["bytes"] = Path(path).read_bytes()
            return {"text": "I can walk dogs"}

        mock_stt.transcribe.side_effect = transcribe

        await pipeline.process(sample_wav_bytes, PostKind.offer)

        path = _temp_path_from(mock_stt)
        assert path.suffix == ".wav"
        assert seen["bytes"] == sample_wav_bytes
        assert not path.exists()

    async def test_empty_transcript(self, pipeline, mock_stt, mock_llm, sample_wav_bytes):
        mock_stt.transcribe.return_value = {"text": "   ", "language": "en"}

        with pytest.raises(InsufficientInfoError, match="No speech detected"):
            await pipeline.process(sample_wav_bytes, PostKind.request)

        mock_llm.generate.assert_not_called()
        assert not _temp_path_from(mock_stt).exists()

    async def test_transcription_failure_removes_temp_file(
        self, pipeline, mock_stt, sample_wav_bytes
    ):
        mock_stt.transcribe.side_effect = TranscriptionError("status: 500")

        with pytest.raises(TranscriptionError):
            await pipeline.process(sample_wav_bytes, PostKind.offer)

        assert not _temp_path_from(mock_stt).exists()

    async def test_extraction_failure_removes_temp_file(
        self, pipeline, mock_stt, mock_llm, sample_wav_bytes
    ):
        mock_llm.generate.return_value = '{"missing_fields": ["title"]}'

        with pytest.raises(InsufficientInfoError):
            await pipeline.process(sample_wav_bytes, PostKind.offer)

        assert not _temp_path_from(mock_stt).exists()


class TestCreatePipeline:
    def test_builds_from_settings(self):
        settings = SimpleNamespace(
            stt_provider="groq", llm_provider="groq", extraction_max_attempts=2
        )
        with (
            patch("src.services.voice_pipeline.create_stt", return_value=AsyncMock()) as stt,
            patch("src.services.voice_pipeline.create_llm", return_value=AsyncMock()) as llm,
        ):
            pipeline = create_pipeline(settings)

        stt.assert_called_once_with("groq")
        llm.assert_called_once_with("groq")
        assert pipeline._extractor._max_attempts == 2

    def test_unknown_provider(self):
        settings = SimpleNamespace(
            stt_provider="nope", llm_provider="groq", extraction_max_attempts=3
        )
        with pytest.raises(ConfigurationError, match="Unknown STT provider"):
            create_pipeline(settings)


class TestTempAudio:
    @pytest.fixture
    def temp_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        return tmp_path

    def test_written_under_temp_dir(self, temp_dir, sample_wav_bytes):
        path = voice_pipeline._write_temp_audio(sample_wav_bytes)

        assert path.parent == temp_dir
        assert path.name.startswith("recording-")
        assert path.read_bytes() == sample_wav_bytes

    async def test_failed_write_leaves_no_file(
        self, temp_dir, monkeypatch, pipeline, mock_stt, sample_wav_bytes
    ):
        def disk_full(fd, mode):
            os.close(fd)
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(voice_pipeline.os, "fdopen", disk_full)

        with pytest.raises(OSError, match="No space left"):
            await pipeline.process(sample_wav_bytes, PostKind.offer)

        mock_stt.transcribe.assert_not_called()
        assert list(temp_dir.glob("recording-*")) == []
