import contextlib

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.rsvps.dependencies import get_rsvp_store
from src.rsvps.tests.inmemory_store import InMemoryRsvpStore


@pytest.fixture
def inmemory_store():
    """Create a fresh in-memory RSVP store for each test."""
    return InMemoryRsvpStore()


@pytest.fixture
def client_factory():
    """Build a test client with the given dependency overrides applied."""

    @contextlib.asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return _client_factory


@pytest.fixture
async def client(client_factory, inmemory_store):
    """Create a test client backed by the in-memory store."""
    async with client_factory({get_rsvp_store: lambda: inmemory_store}) as ac:
        yield ac
