"""Supabase client singleton and the Supabase-backed store.

Provides ``get_supabase()`` which returns a lazily-initialized, process-wide
Supabase client using credentials from ``settings``, and ``SupabaseStore``
which implements ``MarketplaceStore`` on top of it.  Tables, constraints and
the ``accept_bid`` function live in ``sql/schema.sql``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from marketplace.core.config import settings
from marketplace.db.base import (
    ACCEPT_NOT_FOUND,
    DuplicateKeyError,
    MarketplaceStore,
    Row,
    StoreError,
)

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def _execute(request: Any) -> Any:
    """Run a PostgREST request, translating client errors into store errors."""
    try:
        return request.execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise DuplicateKeyError(exc.message or str(exc)) from exc
        logger.error(
            "supabase_request_failed",
            extra={"code": exc.code, "error_message": exc.message},
        )
        raise StoreError(exc.message or str(exc)) from exc
    except httpx.HTTPError as exc:
        logger.error("supabase_unreachable", extra={"error_message": str(exc)})
        raise StoreError(str(exc)) from exc


def _first(result: Any) -> Row | None:
    return result.data[0] if result.data else None


class SupabaseStore(MarketplaceStore):
    """``MarketplaceStore`` backed by Supabase tables."""

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def ping(self) -> bool:
        result = _execute(self.client.table("profiles").select("id").limit(1))
        return result is not None

    # -- profiles -----------------------------------------------------------

    def get_profile(self, profile_id: str) -> Row | None:
        result = _execute(
            self.client.table("profiles").select("*").eq("id", profile_id).limit(1)
        )
        return _first(result)

    def insert_profile_if_absent(self, row: Row) -> Row:
        # ON CONFLICT (id) DO NOTHING: a racing creator's row wins untouched
        _execute(
            self.client.table("profiles").upsert(
                row, on_conflict="id", ignore_duplicates=True
            )
        )
        stored = self.get_profile(row["id"])
        if stored is None:
            raise StoreError(f"profile {row['id']} missing after insert")
        return stored

    def update_profile(self, profile_id: str, patch: Row) -> Row | None:
        result = _execute(
            self.client.table("profiles").update(patch).eq("id", profile_id)
        )
        return _first(result)

    # -- jobs ---------------------------------------------------------------

    def insert_job(self, row: Row) -> Row:
        result = _execute(self.client.table("jobs").insert(row))
        created = _first(result)
        if created is None:
            raise StoreError("job insert returned no row")
        return created

    def get_job(self, job_id: str) -> Row | None:
        result = _execute(
            self.client.table("jobs").select("*").eq("id", job_id).limit(1)
        )
        return _first(result)

    def select_jobs(
        self,
        status: str | None = None,
        category: str | None = None,
        customer_id: str | None = None,
    ) -> list[Row]:
        query = self.client.table("jobs").select("*")
        if status is not None:
            query = query.eq("status", status)
        if category is not None:
            query = query.eq("category", category)
        if customer_id is not None:
            query = query.eq("customer_id", customer_id)
        return _execute(query).data or []

    def update_job(
        self,
        job_id: str,
        patch: Row,
        expected_status: str | None = None,
    ) -> Row | None:
        query = self.client.table("jobs").update(patch).eq("id", job_id)
        if expected_status is not None:
            query = query.eq("status", expected_status)
        return _first(_execute(query))

    # -- bids ---------------------------------------------------------------

    def insert_bid(self, row: Row) -> Row:
        result = _execute(self.client.table("bids").insert(row))
        created = _first(result)
        if created is None:
            raise StoreError("bid insert returned no row")
        return created

    def get_bid(self, bid_id: str) -> Row | None:
        result = _execute(
            self.client.table("bids").select("*").eq("id", bid_id).limit(1)
        )
        return _first(result)

    def select_bids(
        self,
        job_id: str | None = None,
        provider_id: str | None = None,
    ) -> list[Row]:
        query = self.client.table("bids").select("*")
        if job_id is not None:
            query = query.eq("job_id", job_id)
        if provider_id is not None:
            query = query.eq("provider_id", provider_id)
        return _execute(query).data or []

    def update_bid(
        self,
        bid_id: str,
        patch: Row,
        expected_status: str | None = None,
    ) -> Row | None:
        query = self.client.table("bids").update(patch).eq("id", bid_id)
        if expected_status is not None:
            query = query.eq("status", expected_status)
        return _first(_execute(query))

    def accept_bid(self, bid_id: str, now: str) -> tuple[Row | None, str | None]:
        result = _execute(
            self.client.rpc("accept_bid", {"p_bid_id": bid_id, "p_now": now})
        )
        # Some supabase-py versions wrap scalar results in a list
        outcome = result.data
        if isinstance(outcome, list):
            outcome = outcome[0] if outcome else None

        if outcome != "accepted":
            return None, outcome or ACCEPT_NOT_FOUND

        bid = self.get_bid(bid_id)
        if bid is None:
            raise StoreError(f"bid {bid_id} missing after acceptance")
        return bid, None

    # -- providers ----------------------------------------------------------

    def get_provider_reputation(self, user_id: str) -> Row | None:
        result = _execute(
            self.client.table("service_providers")
            .select("user_id, rating, review_count, completed_jobs, verified")
            .eq("user_id", user_id)
            .limit(1)
        )
        return _first(result)
