"""Unit tests for the Supabase-backed store, against a mocked client."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from conftest import chainable_table_mock
from marketplace.db.base import (
    ACCEPT_JOB_NOT_OPEN,
    ACCEPT_NOT_FOUND,
    DuplicateKeyError,
    StoreError,
)
from marketplace.db.supabase import SupabaseStore


def _api_error(code: str, message: str = "boom") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


class TestSupabaseReads:
    """Queries are built with PostgREST chaining."""

    def test_get_job_returns_first_row(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        table.execute.return_value = MagicMock(data=[{"id": "j1", "status": "open"}])

        row = SupabaseStore(mock_supabase).get_job("j1")

        assert row == {"id": "j1", "status": "open"}
        mock_supabase.table.assert_called_with("jobs")
        table.eq.assert_called_with("id", "j1")

    def test_missing_row_is_none(self, mock_supabase: MagicMock) -> None:
        assert SupabaseStore(mock_supabase).get_bid("nope") is None

    def test_select_jobs_pushes_down_exact_columns(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value

        SupabaseStore(mock_supabase).select_jobs(status="open", category="cleaning")

        table.eq.assert_any_call("status", "open")
        table.eq.assert_any_call("category", "cleaning")
        assert table.eq.call_count == 2

    def test_reputation_reads_service_providers(self, mock_supabase: MagicMock) -> None:
        SupabaseStore(mock_supabase).get_provider_reputation("p1")
        mock_supabase.table.assert_called_with("service_providers")


class TestSupabaseWrites:
    """Inserts and conditional updates."""

    def test_profile_insert_is_on_conflict_do_nothing(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        stored = {"id": "u1", "email": "a@example.com"}
        table.execute.side_effect = [MagicMock(data=[]), MagicMock(data=[stored])]

        row = SupabaseStore(mock_supabase).insert_profile_if_absent(
            {"id": "u1", "email": "a@example.com"}
        )

        assert row == stored
        table.upsert.assert_called_once_with(
            {"id": "u1", "email": "a@example.com"}, on_conflict="id", ignore_duplicates=True
        )

    def test_unique_violation_becomes_duplicate_key(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        table.execute.side_effect = _api_error("23505", "duplicate key value")

        with pytest.raises(DuplicateKeyError):
            SupabaseStore(mock_supabase).insert_bid({"id": "b1"})

    def test_other_api_errors_become_store_error(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        table.execute.side_effect = _api_error("42501", "permission denied")

        with pytest.raises(StoreError) as info:
            SupabaseStore(mock_supabase).insert_job({"id": "j1"})
        assert not isinstance(info.value, DuplicateKeyError)

    def test_transport_errors_become_store_error(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        table.execute.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(StoreError):
            SupabaseStore(mock_supabase).get_profile("u1")

    def test_update_job_with_expected_status(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        table.execute.return_value = MagicMock(data=[])

        row = SupabaseStore(mock_supabase).update_job(
            "j1", {"status": "cancelled"}, expected_status="open"
        )

        assert row is None
        table.update.assert_called_once_with({"status": "cancelled"})
        table.eq.assert_any_call("id", "j1")
        table.eq.assert_any_call("status", "open")

    def test_update_bid_without_expected_status(self, mock_supabase: MagicMock) -> None:
        table = mock_supabase.table.return_value
        table.execute.return_value = MagicMock(data=[{"id": "b1", "status": "rejected"}])

        row = SupabaseStore(mock_supabase).update_bid("b1", {"status": "rejected"})

        assert row == {"id": "b1", "status": "rejected"}
        table.eq.assert_called_once_with("id", "b1")


class TestSupabaseAcceptBid:
    """Acceptance runs as a single database function."""

    def test_accepted_outcome_returns_bid(self, mock_supabase: MagicMock) -> None:
        mock_supabase.rpc.return_value.execute.return_value = MagicMock(data="accepted")
        bids = chainable_table_mock()
        bids.execute.return_value = MagicMock(data=[{"id": "b1", "status": "accepted"}])
        mock_supabase.table.return_value = bids

        row, outcome = SupabaseStore(mock_supabase).accept_bid("b1", "2026-03-02T12:00:00+00:00")

        assert outcome is None
        assert row == {"id": "b1", "status": "accepted"}
        mock_supabase.rpc.assert_called_once_with(
            "accept_bid", {"p_bid_id": "b1", "p_now": "2026-03-02T12:00:00+00:00"}
        )

    def test_list_wrapped_outcome(self, mock_supabase: MagicMock) -> None:
        mock_supabase.rpc.return_value.execute.return_value = MagicMock(
            data=["job_not_open"]
        )

        row, outcome = SupabaseStore(mock_supabase).accept_bid("b1", "now")

        assert row is None
        assert outcome == ACCEPT_JOB_NOT_OPEN

    def test_empty_outcome_is_not_found(self, mock_supabase: MagicMock) -> None:
        mock_supabase.rpc.return_value.execute.return_value = MagicMock(data=None)

        row, outcome = SupabaseStore(mock_supabase).accept_bid("b1", "now")

        assert row is None
        assert outcome == ACCEPT_NOT_FOUND


class TestSupabasePing:
    """ping() runs a trivial select."""

    def test_ping(self, mock_supabase: MagicMock) -> None:
        assert SupabaseStore(mock_supabase).ping() is True
        mock_supabase.table.assert_called_with("profiles")
