"""
Shared test fixtures.

Provides a FastAPI TestClient wired to:
  • the test venue catalogue from tests.mocks.models
  • a temporary SQLite database (via app lifespan)
  • a fixed clock (tests.mocks.models.NOW)

The `client` fixture runs the full lifespan (DB init / shutdown) so that
booking endpoints backed by SQLite work correctly in tests.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_now
from app.main import app
from tests.mocks.models import MOCK_VENUES, NOW


# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture()
def _test_env(monkeypatch, tmp_path):
    """
    Internal fixture that patches the DB path, venue catalogue and
    rate limiter so that the app lifespan runs cleanly against a temp
    database and test venues.
    """
    # ── Temp database ─────────────────────────────────────────────────
    import app.db as db_mod

    monkeypatch.setattr(db_mod, "DB_PATH", str(tmp_path / "test.db"))

    # ── Test venues ───────────────────────────────────────────────────
    monkeypatch.setattr("app.main.get_mock_venues", lambda: list(MOCK_VENUES))

    # ── Disable rate limiting in tests ────────────────────────────────
    from app.rate_limit import limiter as _limiter
    monkeypatch.setattr(_limiter, "enabled", False)


@pytest.fixture()
def client(_test_env) -> TestClient:
    """
    FastAPI TestClient with test venues, temp DB and the clock frozen
    at NOW.

    Uses a context manager so the lifespan runs (DB init/shutdown).
    """
    app.dependency_overrides[get_now] = lambda: NOW

    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc

    app.dependency_overrides.clear()


@pytest.fixture()
async def booking_db(tmp_path, monkeypatch):
    """Initialized temp database for tests that call app.db directly."""
    from app import db

    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "db_test.db"))
    await db.init_db()
    yield db
    await db.close_db()
