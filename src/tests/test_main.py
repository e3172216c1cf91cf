"""Tests for application startup against a real SQLite database."""

import logging
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.config.settings import settings
from src.main import app, lifespan
from src.rsvps.dtos import StorageUnavailable
from src.rsvps.urls import LIST_RSVPS_URL, SUBMIT_RSVP_URL


@pytest.fixture
def sqlite_settings(tmp_path, monkeypatch):
    """Point the app at a throwaway database with the listing open."""
    monkeypatch.setattr(settings, "DB_DSN", f"sqlite+aiosqlite:///{tmp_path / 'rsvps.db'}")
    monkeypatch.setattr(settings, "OPERATOR_TOKEN", "")
    monkeypatch.setattr(settings, "RUN_MIGRATIONS_ON_STARTUP", False)
    yield settings
    if hasattr(app.state, "rsvp_store"):
        del app.state.rsvp_store


async def test_startup_fails_when_storage_unavailable(sqlite_settings, tmp_path, monkeypatch):
    monkeypatch.setattr(
        settings, "DB_DSN", f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'rsvps.db'}"
    )

    with pytest.raises(StorageUnavailable):
        async with lifespan(app):
            pass


async def test_submit_then_list_through_lifespan(sqlite_settings):
    """Test the guest and operator flows against the store built at startup."""
    payload = {
        "name": "Ana García",
        "attending": "yes",
        "guests": 2,
        "allergies": ["Vegan"],
        "transport": "bus",
    }

    async with lifespan(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            submitted = await client.post(SUBMIT_RSVP_URL, json=payload)

            # a row written by the old form, with the raw guests input
            async with app.state.rsvp_store.engine.begin() as conn:
                await conn.execute(
                    text(
                        "INSERT INTO rsvps (name, attending, guests, transport) "
                        "VALUES ('Old', 'no', '', 'bus')"
                    )
                )

            listed = await client.get(LIST_RSVPS_URL)

    assert submitted.status_code == 201
    assert submitted.json() == {"success": True, "message": "RSVP received! Thank you."}

    assert listed.status_code == 200
    rows = {row["name"]: row for row in listed.json()}
    assert rows["Ana García"]["attending"] == "yes"
    assert rows["Ana García"]["guests"] == 2
    assert rows["Ana García"]["allergies"] == ["Vegan"]
    assert rows["Old"]["guests"] is None
    created_at = datetime.fromisoformat(rows["Ana García"]["created_at"].replace("Z", "+00:00"))
    assert created_at.utcoffset() == timedelta(0)


async def test_startup_migrations_keep_app_logging(sqlite_settings, monkeypatch, caplog):
    """Test running alembic at startup leaves the app's log output alone."""
    monkeypatch.setattr(settings, "RUN_MIGRATIONS_ON_STARTUP", True)
    caplog.set_level(logging.INFO)

    async with lifespan(app):
        assert await app.state.rsvp_store.list_all() == []

    assert "RSVP storage ready" in caplog.text
    assert logging.getLogger("src.rsvps.repository.store").isEnabledFor(logging.INFO)
