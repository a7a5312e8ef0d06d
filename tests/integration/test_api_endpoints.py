"""Integration tests for the REST endpoints.

Covers post CRUD against a temporary file store and ``POST /process-audio``
through the real pipeline with mocked providers, including the mapping of
each failure kind to its HTTP status and error envelope.
"""

import json
from datetime import date
from pathlib import Path

import pytest

from src.api.routes.audio import get_voice_pipeline
from src.core.config import get_settings
from src.core.exceptions import TranscriptionError

NEW_POST = {
    "title": "Help moving",
    "type": "Request",
    "author": "Amy",
    "location": "Boston",
    "category": "Moving",
}


def _audio(wav_bytes: bytes) -> dict:
    return {"audio": ("recording.wav", wav_bytes, "audio/wav")}


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


class TestPostEndpoints:
    async def test_list_returns_seed_posts(self, async_client):
        resp = await async_client.get("/posts")
        assert resp.status_code == 200
        body = resp.json()
        assert [p["id"] for p in body] == [1, 2, 3]
        assert body[0]["date"] == "2024-03-15"

    async def test_create_returns_201(self, async_client):
        resp = await async_client.post("/posts", json=NEW_POST)

        assert resp.status_code == 201
        body = resp.json()
        assert body["id"] == 4
        assert body["description"] == ""
        assert body["type"] == "Request"
        assert body["date"] == date.today().isoformat()

        listed = (await async_client.get("/posts")).json()
        assert listed[0]["title"] == "Help moving"

    async def test_create_written_to_file(self, async_client, posts_file):
        await async_client.post("/posts", json=NEW_POST)

        stored = json.loads(posts_file.read_text())
        assert stored[0]["title"] == "Help moving"
        assert len(stored) == 4

    async def test_create_missing_field_is_422(self, async_client):
        body = {k: v for k, v in NEW_POST.items() if k != "author"}
        resp = await async_client.post("/posts", json=body)

        assert resp.status_code == 422
        envelope = resp.json()
        assert envelope["type"] == "VALIDATION_ERROR"
        assert any(d["loc"][-1] == "author" for d in envelope["details"])

    async def test_create_invalid_type_is_422(self, async_client):
        resp = await async_client.post("/posts", json={**NEW_POST, "type": "Trade"})
        assert resp.status_code == 422

    async def test_get_post(self, async_client):
        resp = await async_client.get("/posts/2")
        assert resp.status_code == 200
        assert resp.json()["author"] == "Mike Johnson"

    async def test_get_missing_post(self, async_client):
        resp = await async_client.get("/posts/999")
        assert resp.status_code == 404
        body = resp.json()
        assert body["type"] == "NOT_FOUND"
        assert "timestamp" in body

    async def test_update_post(self, async_client):
        resp = await async_client.put("/posts/1", json={"location": "Boston"})
        assert resp.status_code == 200
        assert resp.json()["location"] == "Boston"
        assert resp.json()["title"] == "Free Piano Lessons for Seniors"

    async def test_delete_post(self, async_client):
        resp = await async_client.delete("/posts/3")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Post deleted successfully"}

        assert (await async_client.get("/posts/3")).status_code == 404


# ---------------------------------------------------------------------------
# Process audio
# ---------------------------------------------------------------------------


class TestProcessAudio:
    async def test_success(self, async_client, sample_wav_bytes, mock_stt):
        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Offer"}
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "title": "Free Guitar Lessons",
            "description": "Beginner guitar lessons on weekends",
            "location": "Cambridge",
            "category": "Education",
            "author": "Jamie",
            "type": "Offer",
        }
        temp_path = Path(mock_stt.transcribe.call_args.args[0])
        assert not temp_path.exists()

    async def test_absent_fields_omitted(self, async_client, sample_wav_bytes, mock_llm):
        mock_llm.generate.return_value = json.dumps(
            {"title": "Need a ladder", "description": "", "missing_fields": []}
        )

        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Request"}
        )

        assert resp.status_code == 200
        assert resp.json() == {"title": "Need a ladder", "type": "Request"}

    async def test_type_defaults_to_offer(self, async_client, sample_wav_bytes):
        resp = await async_client.post("/process-audio", files=_audio(sample_wav_bytes))
        assert resp.status_code == 200
        assert resp.json()["type"] == "Offer"

    async def test_empty_type_defaults_to_offer(self, async_client, sample_wav_bytes):
        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": ""}
        )
        assert resp.status_code == 200
        assert resp.json()["type"] == "Offer"

    async def test_missing_audio_is_400(self, async_client):
        resp = await async_client.post("/process-audio", data={"type": "Offer"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "No audio file provided"
        assert resp.json()["type"] == "BAD_REQUEST"

    async def test_empty_audio_is_400(self, async_client):
        resp = await async_client.post(
            "/process-audio", files=_audio(b""), data={"type": "Offer"}
        )
        assert resp.status_code == 400

    async def test_invalid_type_is_400(self, async_client, sample_wav_bytes):
        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Trade"}
        )
        assert resp.status_code == 400
        assert "Offer" in resp.json()["error"]

    async def test_silence_is_insufficient_info(self, async_client, sample_wav_bytes, mock_stt):
        mock_stt.transcribe.return_value = {"text": ""}

        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Offer"}
        )

        assert resp.status_code == 422
        body = resp.json()
        assert body["type"] == "INSUFFICIENT_INFO"
        assert "missingFields" not in body

    async def test_missing_fields_reported(self, async_client, sample_wav_bytes, mock_llm):
        mock_llm.generate.return_value = json.dumps({"missing_fields": ["title", "author"]})

        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Request"}
        )

        assert resp.status_code == 422
        body = resp.json()
        assert body["type"] == "INSUFFICIENT_INFO"
        assert body["missingFields"] == ["title", "author"]
        assert mock_llm.generate.await_count == 1

    async def test_invalid_format_after_retries(self, async_client, sample_wav_bytes, mock_llm):
        mock_llm.generate.return_value = "definitely not json"

        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Offer"}
        )

        assert resp.status_code == 422
        body = resp.json()
        assert body["type"] == "INVALID_FORMAT"
        assert isinstance(body["details"], list)
        assert mock_llm.generate.await_count == 3

    async def test_transcription_failure_is_500(self, async_client, sample_wav_bytes, mock_stt):
        mock_stt.transcribe.side_effect = TranscriptionError(
            "Transcription failed with status: 503"
        )

        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Offer"}
        )

        assert resp.status_code == 500
        assert resp.json()["type"] == "API_ERROR"

    async def test_llm_failure_is_500(self, async_client, sample_wav_bytes, mock_llm):
        mock_llm.generate.side_effect = RuntimeError("Groq API error (400)")

        resp = await async_client.post(
            "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Offer"}
        )

        assert resp.status_code == 500
        assert resp.json()["type"] == "API_ERROR"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def unconfigured(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "")
    monkeypatch.setenv("STT_PROVIDER", "groq")
    monkeypatch.setenv("LLM_PROVIDER", "groq")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


async def test_missing_api_key_is_server_error(unconfigured, app, async_client, sample_wav_bytes):
    del app.dependency_overrides[get_voice_pipeline]

    resp = await async_client.post(
        "/process-audio", files=_audio(sample_wav_bytes), data={"type": "Offer"}
    )

    assert resp.status_code == 500
    body = resp.json()
    assert body["type"] == "SERVER_ERROR"
    assert "not configured" in body["error"]
