"""Shared pytest fixtures for the Comm-It test suite.

Provides common test fixtures used across unit and integration tests,
including mock LLM/STT providers, audio clips, post stores and database
setup helpers.
"""

import json
import struct
from unittest.mock import AsyncMock

import pytest

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def extraction_json():
    """A well-formed model reply for an Offer dictation."""
    return json.dumps(
        {
            "title": "Free Guitar Lessons",
            "description": "Beginner guitar lessons on weekends",
            "location": "Cambridge",
            "category": "Education",
            "author": "Jamie",
            "missing_fields": [],
        }
    )


@pytest.fixture
def mock_llm(extraction_json):
    """Create a mock LLM provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface with a
        default generate response containing a complete extraction.
    """
    from src.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = extraction_json
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default transcribe response.
    """
    from src.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = {
        "text": "Hi, I'm Jamie and I'm offering free guitar lessons in Cambridge.",
        "language": "en",
        "duration": 4.2,
    }
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    import math

    sample_rate = 16000
    duration = 1.0
    frequency = 440.0
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """Wrap the sample PCM data in a WAV container, as the browser recorder does.

    Returns:
        bytes: A complete WAV file.
    """
    import io
    import wave

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(sample_pcm_bytes)
    return buf.getvalue()


@pytest.fixture
def sample_audio_path(tmp_path, sample_wav_bytes):
    """Write the sample WAV clip to a temporary file.

    Returns:
        str: Path to the temporary WAV file.
    """
    wav_path = tmp_path / "test_audio.wav"
    wav_path.write_bytes(sample_wav_bytes)
    return str(wav_path)


# ---------------------------------------------------------------------------
# Storage Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def posts_file(tmp_path):
    """Path of a not-yet-existing posts JSON file."""
    return tmp_path / "data" / "posts.json"


@pytest.fixture
def file_store(posts_file):
    """A seeded FilePostStore rooted in a temporary directory."""
    from src.services.storage.file_store import FilePostStore

    return FilePostStore(posts_file, seed=True)


@pytest.fixture
def post_service(file_store):
    """A PostService over the temporary file store."""
    from src.services.posts import PostService

    return PostService(file_store)


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from src.services.storage import models_db  # noqa: F401
    from src.services.storage.database import Base

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()
