"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")


# Settings are read when app.config is first imported by a test module.
_set_default_env()

from app.schemas.user import Actor  # noqa: E402
from app.services.election_service import ElectionService  # noqa: E402
from tests.fakes import FakeSupabase  # noqa: E402

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Fresh in-memory Supabase tables."""
    return FakeSupabase()


@pytest.fixture
def service(fake_db: FakeSupabase) -> ElectionService:
    """Election service backed by the in-memory tables."""
    return ElectionService(fake_db)  # type: ignore[arg-type]


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", organization_id="ORG1", role="admin")


@pytest.fixture
def member() -> Actor:
    return Actor(id="member-1", organization_id="ORG1", role="member")


@pytest.fixture
def outsider() -> Actor:
    """An admin of a different organization."""
    return Actor(id="admin-2", organization_id="ORG2", role="admin")


@pytest.fixture
def api(client: TestClient, fake_db: FakeSupabase, member: Actor) -> Iterator[dict]:
    """Route HTTP calls through the fake tables as a switchable actor."""
    from app.dependencies import get_current_actor, get_db_client
    from app.main import app

    state = {"actor": member, "client": client, "db": fake_db}
    app.dependency_overrides[get_db_client] = lambda: fake_db
    app.dependency_overrides[get_current_actor] = lambda: state["actor"]
    yield state
    app.dependency_overrides.clear()
