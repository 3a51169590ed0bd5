"""Shared test fixtures.

Provides a fresh ``InMemoryStore`` per test, a FastAPI ``TestClient`` wired
to it, seeded customer/provider profiles, and a mock Supabase client.
"""

import os
from collections.abc import Generator
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("STORE_BACKEND", "memory")

from marketplace.db.memory import InMemoryStore  # noqa: E402
from marketplace.models.enums import UserType  # noqa: E402
from marketplace.models.profile import Identity, Profile  # noqa: E402
from marketplace.services.profiles import ensure_profile  # noqa: E402

NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


def auth_headers(
    user_id: str,
    email: str | None = None,
    user_type: str | None = None,
) -> dict[str, str]:
    """Return the auth-layer headers identifying *user_id*."""
    headers = {
        "X-User-Id": user_id,
        "X-User-Email": email or f"{user_id}@example.com",
    }
    if user_type:
        headers["X-User-Type"] = user_type
    return headers


def chainable_table_mock() -> MagicMock:
    """Return a mock that supports PostgREST fluent chaining."""
    m = MagicMock()
    for method in ("select", "insert", "upsert", "update", "eq", "limit"):
        getattr(m, method).return_value = m
    m.execute.return_value = MagicMock(data=[])
    return m


@pytest.fixture()
def store() -> InMemoryStore:
    """Provide an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture()
def customer(store: InMemoryStore) -> Profile:
    """A customer profile named Carol."""
    return ensure_profile(
        store,
        Identity(id="cust-1", email="carol@example.com", display_name="Carol"),
        now=NOW,
    )


@pytest.fixture()
def provider(store: InMemoryStore) -> Profile:
    """A provider profile named Pat."""
    return ensure_profile(
        store,
        Identity(
            id="prov-1",
            email="pat@example.com",
            display_name="Pat",
            user_type=UserType.provider,
        ),
        now=NOW,
    )


@pytest.fixture()
def second_provider(store: InMemoryStore) -> Profile:
    """Another provider profile named Quinn."""
    return ensure_profile(
        store,
        Identity(
            id="prov-2",
            email="quinn@example.com",
            display_name="Quinn",
            user_type=UserType.provider,
        ),
        now=NOW,
    )


@pytest.fixture()
def mock_supabase() -> MagicMock:
    """Provide a mock Supabase client with a chainable default table."""
    mock_client = MagicMock()
    mock_client.table.return_value = chainable_table_mock()
    return mock_client


@pytest.fixture()
def test_client(store: InMemoryStore) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient backed by the per-test store."""
    from marketplace.db.store import get_store
    from marketplace.main import app

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
