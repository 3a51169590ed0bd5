"""Bid store operations and the acceptance invariant.

Bids move ``pending -> accepted`` or ``pending -> rejected``; both are
terminal.  A job has at most one accepted bid: acceptance is a single store
primitive that flips the bid to ``accepted`` and the job from ``open`` to
``in_progress`` together, so of two concurrent acceptances on one job the
second always fails with ``JobNotOpen``.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from marketplace.core.errors import (
    DuplicateBid,
    InvalidBid,
    InvalidTransition,
    JobNotOpen,
    NotFound,
    PermissionDenied,
)
from marketplace.core.timeago import format_time_ago
from marketplace.db.base import (
    ACCEPT_BID_NOT_PENDING,
    ACCEPT_JOB_NOT_OPEN,
    DuplicateKeyError,
    MarketplaceStore,
)
from marketplace.models.bid import (
    Bid,
    BidCreate,
    JobBid,
    ProviderBid,
    ProviderReputation,
)
from marketplace.models.enums import BidStatus, JobStatus, UserType
from marketplace.models.job import Job, JobSummary
from marketplace.services.jobs import load_job, newest_first
from marketplace.services.profiles import get_profile, profile_summaries

logger = logging.getLogger(__name__)


def _validate_bid_fields(values: dict[str, Any]) -> None:
    amount = values.get("amount")
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise InvalidBid("amount must be a finite number greater than 0")
    for name in ("message", "estimated_duration"):
        if not str(values.get(name) or "").strip():
            raise InvalidBid(f"{name} must not be blank")


def load_bid(store: MarketplaceStore, bid_id: str) -> Bid:
    """Fetch a bid record or raise ``NotFound``."""
    row = store.get_bid(str(bid_id))
    if row is None:
        raise NotFound(f"Bid not found: {bid_id}")
    return Bid(**row)


def _owned_job(store: MarketplaceStore, bid: Bid, actor_id: str) -> Job:
    job = load_job(store, str(bid.job_id))
    if job.customer_id != actor_id:
        raise PermissionDenied("Only the job owner can decide on its bids")
    return job


def create_bid(
    store: MarketplaceStore,
    job_id: str,
    provider_id: str,
    fields: BidCreate,
    now: datetime | None = None,
) -> Bid:
    """Submit a provider's offer on an open job with ``status=pending``."""
    job = load_job(store, job_id)

    values = fields.model_dump(mode="json")
    _validate_bid_fields(values)

    if job.status != JobStatus.open:
        raise JobNotOpen(f"Job {job.id} is {job.status.value} and no longer accepts bids")

    provider = get_profile(store, provider_id)
    if provider.user_type != UserType.provider:
        raise PermissionDenied("Only provider profiles can bid on jobs")
    if job.customer_id == provider_id:
        raise PermissionDenied("Cannot bid on your own job")

    if store.select_bids(job_id=str(job.id), provider_id=provider_id):
        raise DuplicateBid(f"Provider {provider_id} already bid on job {job.id}")

    now = now or datetime.now(timezone.utc)
    row = {
        **values,
        "id": str(uuid4()),
        "job_id": str(job.id),
        "provider_id": provider_id,
        "status": BidStatus.pending.value,
        "created_at": now.isoformat(),
        "updated_at": now.isoformat(),
    }
    try:
        created = store.insert_bid(row)
    except DuplicateKeyError as exc:
        # Two submissions from the same provider raced past the check above
        raise DuplicateBid(f"Provider {provider_id} already bid on job {job.id}") from exc

    bid = Bid(**created)
    logger.info(
        "bid_created",
        extra={
            "bid_id": str(bid.id),
            "job_id": str(job.id),
            "provider_id": provider_id,
            "amount": bid.amount,
        },
    )
    return bid


def accept_bid(
    store: MarketplaceStore,
    bid_id: str,
    actor_id: str,
    now: datetime | None = None,
    auto_reject_siblings: bool = False,
) -> Bid:
    """Accept a pending bid and move its job to ``in_progress``, atomically.

    Only the job owner may accept, only while the job is ``open`` and the bid
    ``pending``.  Losing a race against a concurrent acceptance raises
    ``JobNotOpen``.  Sibling bids stay ``pending`` unless
    *auto_reject_siblings* is set.
    """
    bid = load_bid(store, bid_id)
    job = _owned_job(store, bid, actor_id)

    if job.status != JobStatus.open:
        raise JobNotOpen(f"Job {job.id} is {job.status.value}")
    if bid.status != BidStatus.pending:
        raise InvalidTransition(f"Cannot move bid from {bid.status.value} to accepted")

    now = now or datetime.now(timezone.utc)
    row, outcome = store.accept_bid(str(bid.id), now.isoformat())
    if row is None:
        logger.warning(
            "bid_acceptance_lost_race",
            extra={"bid_id": str(bid.id), "job_id": str(job.id), "outcome": outcome},
        )
        if outcome == ACCEPT_JOB_NOT_OPEN:
            raise JobNotOpen(f"Job {job.id} is no longer open")
        if outcome == ACCEPT_BID_NOT_PENDING:
            raise InvalidTransition(f"Bid {bid.id} is no longer pending")
        raise NotFound(f"Bid not found: {bid.id}")

    accepted = Bid(**row)
    logger.info(
        "bid_accepted",
        extra={
            "bid_id": str(accepted.id),
            "job_id": str(job.id),
            "provider_id": accepted.provider_id,
        },
    )

    if auto_reject_siblings:
        _reject_siblings(store, accepted, now)

    return accepted


def _reject_siblings(store: MarketplaceStore, accepted: Bid, now: datetime) -> None:
    rejected = 0
    for row in store.select_bids(job_id=str(accepted.job_id)):
        if row["id"] == str(accepted.id) or row["status"] != BidStatus.pending.value:
            continue
        if store.update_bid(
            row["id"],
            {"status": BidStatus.rejected.value, "updated_at": now.isoformat()},
            expected_status=BidStatus.pending.value,
        ):
            rejected += 1
    logger.info(
        "sibling_bids_rejected",
        extra={"job_id": str(accepted.job_id), "count": rejected},
    )


def reject_bid(
    store: MarketplaceStore,
    bid_id: str,
    actor_id: str,
    now: datetime | None = None,
) -> Bid:
    """Reject a pending bid, as the owner of its job."""
    bid = load_bid(store, bid_id)
    _owned_job(store, bid, actor_id)

    if bid.status != BidStatus.pending:
        raise InvalidTransition(f"Cannot move bid from {bid.status.value} to rejected")

    now = now or datetime.now(timezone.utc)
    row = store.update_bid(
        str(bid.id),
        {"status": BidStatus.rejected.value, "updated_at": now.isoformat()},
        expected_status=BidStatus.pending.value,
    )
    if row is None:
        raise InvalidTransition(f"Bid {bid.id} is no longer pending")

    logger.info("bid_rejected", extra={"bid_id": str(bid.id), "job_id": str(bid.job_id)})
    return Bid(**row)


def list_bids_for_job(
    store: MarketplaceStore,
    job_id: str,
    now: datetime | None = None,
) -> list[JobBid]:
    """Return a job's bids, newest first, with provider and reputation."""
    job = load_job(store, job_id)
    bids = newest_first(Bid(**row) for row in store.select_bids(job_id=str(job.id)))
    providers = profile_summaries(store, {bid.provider_id for bid in bids})

    listing: list[JobBid] = []
    for bid in bids:
        reputation = store.get_provider_reputation(bid.provider_id)
        listing.append(
            JobBid(
                **bid.model_dump(),
                provider=providers.get(bid.provider_id),
                reputation=ProviderReputation(**(reputation or {"user_id": bid.provider_id})),
                time_ago=format_time_ago(bid.created_at, now),
            )
        )
    return listing


def list_bids_for_provider(
    store: MarketplaceStore,
    provider_id: str,
    now: datetime | None = None,
) -> list[ProviderBid]:
    """Return a provider's bids, newest first, with job and customer."""
    bids = newest_first(Bid(**row) for row in store.select_bids(provider_id=provider_id))

    jobs: dict[str, Job] = {}
    for job_id in {str(bid.job_id) for bid in bids}:
        row = store.get_job(job_id)
        if row is not None:
            jobs[job_id] = Job(**row)
    customers = profile_summaries(store, {job.customer_id for job in jobs.values()})

    listing: list[ProviderBid] = []
    for bid in bids:
        job = jobs.get(str(bid.job_id))
        listing.append(
            ProviderBid(
                **bid.model_dump(),
                job=JobSummary(**job.model_dump()) if job else None,
                customer=customers.get(job.customer_id) if job else None,
                time_ago=format_time_ago(bid.created_at, now),
            )
        )
    return listing
