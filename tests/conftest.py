import os

# resto_ordering.db requires DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import resto_ordering.config as config_mod
import resto_ordering.db as db
import resto_ordering.main as main_mod
from resto_ordering.main import app
from resto_ordering.models import Base
from resto_ordering.services.time_utils import get_clock

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_PASSWORD = "testpassword123"

# Monday 2024-06-10 10:00 UTC (12:00 in Europe/Paris)
DEFAULT_NOW = datetime(2024, 6, 10, 10, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Mutable stand-in for system_clock; tests move it with .set()."""

    def __init__(self, now: datetime):
        self.now = now

    def set(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(DEFAULT_NOW)


@pytest.fixture
def session_factory():
    """In-memory SQLite shared by every connection (StaticPool)."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory, clock, monkeypatch):
    """Shared FastAPI TestClient using an in-memory SQLite DB.

    Sets up test admin credentials, pins the clock, and turns rate limiting
    off (tests that need it switch it back on).
    """
    monkeypatch.setattr(config_mod, "ADMIN_USERNAME", TEST_ADMIN_USERNAME)
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    monkeypatch.setattr(main_mod.limiter, "enabled", False)

    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_auth():
    """Returns HTTP Basic Auth tuple for admin endpoints."""
    return (TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)


@pytest.fixture
def create_restaurant(client, admin_auth):
    """Factory creating a restaurant through the admin API."""

    def _create(slug="chez-marcel", **fields):
        payload = {"slug": slug, "name": fields.pop("name", "Chez Marcel")}
        payload.update(fields)
        resp = client.post("/admin/restaurants", json=payload, auth=admin_auth)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
