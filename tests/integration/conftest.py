"""Integration test fixtures for AudioJournal.

Provides an async HTTP client and a sync TestClient (for WebSocket) bound
to an application that uses in-memory storage, a push-fed capture stream
and the scripted speech backend from the root conftest.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from audiojournal.api.app import create_app
from audiojournal.core.config import Settings


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        storage_backend="memory",
        capture_provider="stream",
        authorization_mode="granted",
    )


@pytest.fixture
def app(settings, memory_storage, speech_backend):
    """Create a fresh FastAPI application instance."""
    return create_app(settings, storage=memory_storage, backend=speech_backend)


@pytest.fixture
async def async_client(app):
    """AsyncClient with the application lifespan running.

    ASGITransport does not send lifespan events, so startup and shutdown
    are driven explicitly around the client.
    """
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest.fixture
def test_client(app):
    """Synchronous TestClient for WebSocket tests."""
    with TestClient(app) as c:
        yield c
