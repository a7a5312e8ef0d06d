"""Tests for WhisperSTT with a mocked faster-whisper model."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from src.core.exceptions import TranscriptionError
from src.services.transcription import whisper
from src.services.transcription.whisper import WhisperSTT


def _segment(text: str):
    return SimpleNamespace(text=text)


@pytest.fixture
def model():
    model = MagicMock()
    model.transcribe.return_value = (
        iter([_segment(" I can help "), _segment("  "), _segment("with moving")]),
        SimpleNamespace(language="en", duration=3.5),
    )
    return model


@pytest.fixture
def loader(model):
    whisper.load_model.cache_clear()
    with patch("src.services.transcription.whisper.WhisperModel", return_value=model) as cls:
        yield cls
    whisper.load_model.cache_clear()


async def test_transcribes_clip(loader, model, sample_audio_path):
    stt = WhisperSTT(model_size="base")

    result = await stt.transcribe(str(sample_audio_path))

    assert result == {"text": "I can help with moving", "language": "en", "duration": 3.5}
    kwargs = model.transcribe.call_args.kwargs
    assert kwargs["language"] == "en"
    assert kwargs["vad_filter"] is True


async def test_language_override(loader, model, sample_audio_path):
    await WhisperSTT(model_size="base").transcribe(str(sample_audio_path), language=None)
    assert model.transcribe.call_args.kwargs["language"] is None


async def test_silence_gives_empty_text(loader, model, sample_audio_path):
    model.transcribe.return_value = (iter([]), SimpleNamespace(language=None, duration=1.0))

    result = await WhisperSTT(model_size="base").transcribe(str(sample_audio_path))

    assert result["text"] == ""
    assert result["language"] == "en"


async def test_model_loaded_once_per_size(loader, sample_audio_path):
    stt = WhisperSTT(model_size="tiny")
    await stt.transcribe(str(sample_audio_path))
    await WhisperSTT(model_size="tiny").transcribe(str(sample_audio_path))

    loader.assert_called_once_with("tiny", device="cpu", compute_type="int8")


async def test_decoder_error_is_transcription_error(loader, model, sample_audio_path):
    model.transcribe.side_effect = RuntimeError("bad audio")

    with pytest.raises(TranscriptionError, match="Local transcription failed"):
        await WhisperSTT(model_size="base").transcribe(str(sample_audio_path))


async def test_missing_file(loader, tmp_path):
    with pytest.raises(TranscriptionError, match="not found"):
        await WhisperSTT(model_size="base").transcribe(str(tmp_path / "gone.wav"))
    loader.assert_not_called()
