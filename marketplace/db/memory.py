"""In-process store backed by dicts and one re-entrant lock.

Used for local development and the test-suite.  Every public method runs
under the lock, so ``accept_bid`` and ``insert_profile_if_absent`` are
atomic with respect to each other across threads.
"""

from __future__ import annotations

import copy
import threading

from marketplace.db.base import (
    ACCEPT_BID_NOT_PENDING,
    ACCEPT_JOB_NOT_OPEN,
    ACCEPT_NOT_FOUND,
    DuplicateKeyError,
    MarketplaceStore,
    Row,
)


class InMemoryStore(MarketplaceStore):
    """Dict-backed ``MarketplaceStore``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._profiles: dict[str, Row] = {}
        self._jobs: dict[str, Row] = {}
        self._bids: dict[str, Row] = {}
        self._providers: dict[str, Row] = {}

    def ping(self) -> bool:
        return True

    # -- profiles -----------------------------------------------------------

    def get_profile(self, profile_id: str) -> Row | None:
        with self._lock:
            return _copy(self._profiles.get(profile_id))

    def insert_profile_if_absent(self, row: Row) -> Row:
        with self._lock:
            existing = self._profiles.get(row["id"])
            if existing is None:
                existing = dict(row)
                self._profiles[row["id"]] = existing
            return copy.deepcopy(existing)

    def update_profile(self, profile_id: str, patch: Row) -> Row | None:
        with self._lock:
            current = self._profiles.get(profile_id)
            if current is None:
                return None
            current.update(patch)
            return copy.deepcopy(current)

    # -- jobs ---------------------------------------------------------------

    def insert_job(self, row: Row) -> Row:
        with self._lock:
            if row["id"] in self._jobs:
                raise DuplicateKeyError(f"job {row['id']} already exists")
            self._jobs[row["id"]] = copy.deepcopy(row)
            return copy.deepcopy(row)

    def get_job(self, job_id: str) -> Row | None:
        with self._lock:
            return _copy(self._jobs.get(job_id))

    def select_jobs(
        self,
        status: str | None = None,
        category: str | None = None,
        customer_id: str | None = None,
    ) -> list[Row]:
        with self._lock:
            return [
                copy.deepcopy(job)
                for job in self._jobs.values()
                if (status is None or job["status"] == status)
                and (category is None or job["category"] == category)
                and (customer_id is None or job["customer_id"] == customer_id)
            ]

    def update_job(
        self,
        job_id: str,
        patch: Row,
        expected_status: str | None = None,
    ) -> Row | None:
        with self._lock:
            return _apply(self._jobs.get(job_id), patch, expected_status)

    # -- bids ---------------------------------------------------------------

    def insert_bid(self, row: Row) -> Row:
        with self._lock:
            for bid in self._bids.values():
                if (
                    bid["job_id"] == row["job_id"]
                    and bid["provider_id"] == row["provider_id"]
                ):
                    raise DuplicateKeyError(
                        f"provider {row['provider_id']} already bid on job {row['job_id']}"
                    )
            self._bids[row["id"]] = copy.deepcopy(row)
            return copy.deepcopy(row)

    def get_bid(self, bid_id: str) -> Row | None:
        with self._lock:
            return _copy(self._bids.get(bid_id))

    def select_bids(
        self,
        job_id: str | None = None,
        provider_id: str | None = None,
    ) -> list[Row]:
        with self._lock:
            return [
                copy.deepcopy(bid)
                for bid in self._bids.values()
                if (job_id is None or bid["job_id"] == job_id)
                and (provider_id is None or bid["provider_id"] == provider_id)
            ]

    def update_bid(
        self,
        bid_id: str,
        patch: Row,
        expected_status: str | None = None,
    ) -> Row | None:
        with self._lock:
            return _apply(self._bids.get(bid_id), patch, expected_status)

    def accept_bid(self, bid_id: str, now: str) -> tuple[Row | None, str | None]:
        with self._lock:
            bid = self._bids.get(bid_id)
            job = self._jobs.get(bid["job_id"]) if bid is not None else None
            if bid is None or job is None:
                return None, ACCEPT_NOT_FOUND
            # Job state first, then bid state, matching accept_bid in sql/schema.sql
            if job["status"] != "open":
                return None, ACCEPT_JOB_NOT_OPEN
            if bid["status"] != "pending":
                return None, ACCEPT_BID_NOT_PENDING

            job.update({"status": "in_progress", "updated_at": now})
            bid.update({"status": "accepted", "updated_at": now})
            return copy.deepcopy(bid), None

    # -- providers ----------------------------------------------------------

    def get_provider_reputation(self, user_id: str) -> Row | None:
        with self._lock:
            return _copy(self._providers.get(user_id))

    def put_provider_reputation(self, row: Row) -> None:
        """Seed a ``service_providers`` row (that table is maintained elsewhere)."""
        with self._lock:
            self._providers[row["user_id"]] = copy.deepcopy(row)


def _copy(row: Row | None) -> Row | None:
    return copy.deepcopy(row) if row is not None else None


def _apply(current: Row | None, patch: Row, expected_status: str | None) -> Row | None:
    if current is None:
        return None
    if expected_status is not None and current["status"] != expected_status:
        return None
    current.update(patch)
    return copy.deepcopy(current)
