"""Fixtures for API tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api import session as session_module
from api.main import app
from api.session import SessionStore


@pytest.fixture(autouse=True)
def store(monkeypatch):
    """A fresh session store per test, with auto-restart off."""
    fresh = SessionStore(restart_delay=0)
    monkeypatch.setattr(session_module, "_session_store", fresh)
    return fresh


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session_headers(client):
    """Headers for a freshly opened table."""
    response = await client.post("/api/game/new")
    return {"X-Session-ID": response.json()["session_id"]}
