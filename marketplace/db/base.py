"""Repository interface shared by the storage backends.

Rows cross this boundary as plain dicts in their JSON form (ids and
timestamps as strings), the same shape PostgREST returns.  Services turn
them into pydantic models.

The two primitives with concurrency guarantees are
``insert_profile_if_absent`` (uniqueness on the identity key) and
``accept_bid`` (one check-and-set spanning the bid and its job).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]

# Outcomes returned by ``accept_bid`` when nothing was written
ACCEPT_NOT_FOUND = "not_found"
ACCEPT_JOB_NOT_OPEN = "job_not_open"
ACCEPT_BID_NOT_PENDING = "bid_not_pending"


class StoreError(Exception):
    """The backing store failed to execute a request."""


class DuplicateKeyError(StoreError):
    """An insert hit a uniqueness constraint."""


class MarketplaceStore(ABC):
    """Single authoritative store for profiles, jobs and bids."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the store answers a trivial query."""

    # -- profiles -----------------------------------------------------------

    @abstractmethod
    def get_profile(self, profile_id: str) -> Row | None: ...

    @abstractmethod
    def insert_profile_if_absent(self, row: Row) -> Row:
        """Insert *row* unless a profile with its id exists; return the stored row."""

    @abstractmethod
    def update_profile(self, profile_id: str, patch: Row) -> Row | None: ...

    # -- jobs ---------------------------------------------------------------

    @abstractmethod
    def insert_job(self, row: Row) -> Row: ...

    @abstractmethod
    def get_job(self, job_id: str) -> Row | None: ...

    @abstractmethod
    def select_jobs(
        self,
        status: str | None = None,
        category: str | None = None,
        customer_id: str | None = None,
    ) -> list[Row]:
        """Return jobs matching the given exact-match columns, unordered."""

    @abstractmethod
    def update_job(
        self,
        job_id: str,
        patch: Row,
        expected_status: str | None = None,
    ) -> Row | None:
        """Apply *patch*; with *expected_status* only if the job still has it.

        Returns the updated row, or None when no row matched.
        """

    # -- bids ---------------------------------------------------------------

    @abstractmethod
    def insert_bid(self, row: Row) -> Row:
        """Insert a bid; raises ``DuplicateKeyError`` on a second (job, provider)."""

    @abstractmethod
    def get_bid(self, bid_id: str) -> Row | None: ...

    @abstractmethod
    def select_bids(
        self,
        job_id: str | None = None,
        provider_id: str | None = None,
    ) -> list[Row]: ...

    @abstractmethod
    def update_bid(
        self,
        bid_id: str,
        patch: Row,
        expected_status: str | None = None,
    ) -> Row | None: ...

    @abstractmethod
    def accept_bid(self, bid_id: str, now: str) -> tuple[Row | None, str | None]:
        """Atomically accept a pending bid and move its open job to in_progress.

        Returns ``(bid_row, None)`` on success, otherwise ``(None, outcome)``
        with one of the ``ACCEPT_*`` outcomes and nothing written.
        """

    # -- providers ----------------------------------------------------------

    @abstractmethod
    def get_provider_reputation(self, user_id: str) -> Row | None: ...
