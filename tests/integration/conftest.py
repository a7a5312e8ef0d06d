"""Integration test fixtures for Comm-It.

Provides an async HTTP client over the real FastAPI app, with the post
service bound to a temporary file store and the voice pipeline built
from mock STT/LLM providers.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.api.routes.audio import get_voice_pipeline
from src.services.extraction import PostExtractor
from src.services.posts import PostService, get_post_service
from src.services.storage.file_store import FilePostStore
from src.services.voice_pipeline import VoicePostPipeline


@pytest.fixture
def app():
    """Create a fresh FastAPI application instance."""
    return create_app()


@pytest.fixture
def service(posts_file):
    """PostService over a seeded temporary JSON file."""
    return PostService(FilePostStore(posts_file, seed=True))


@pytest.fixture
def pipeline(mock_stt, mock_llm):
    """Real pipeline wired to the mock providers."""
    return VoicePostPipeline(mock_stt, PostExtractor(mock_llm))


@pytest.fixture
async def async_client(app, service, pipeline):
    """AsyncClient with the post service and voice pipeline overridden."""
    app.dependency_overrides[get_post_service] = lambda: service
    app.dependency_overrides[get_voice_pipeline] = lambda: pipeline
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
