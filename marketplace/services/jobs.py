"""Job store operations and the job status state machine.

Jobs move ``open -> in_progress -> completed`` and may be cancelled from
``open`` or ``in_progress``.  ``completed`` and ``cancelled`` are terminal.
The move to ``in_progress`` belongs to bid acceptance
(``services.bids.accept_bid``); every other move is made by the owning
customer through ``update_job``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any, TypeVar
from uuid import uuid4

from marketplace.core.constants import JOB_TRANSITIONS
from marketplace.core.errors import (
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from marketplace.core.timeago import format_time_ago
from marketplace.db.base import MarketplaceStore
from marketplace.models.enums import JobStatus, UserType
from marketplace.models.job import Job, JobCreate, JobDetail, JobUpdate
from marketplace.services.profiles import get_profile, profile_summaries

logger = logging.getLogger(__name__)

_REQUIRED_TEXT_FIELDS = ("title", "description", "category", "location")
_NON_NULL_FIELDS = ("budget_type", "urgency", "requirements", "images")

T = TypeVar("T")


def newest_first(records: Iterable[T]) -> list[T]:
    """Order by ``created_at`` descending, ties broken by ``id`` ascending."""
    by_id = sorted(records, key=lambda r: str(r.id))
    return sorted(by_id, key=lambda r: r.created_at, reverse=True)


def _validate_job_fields(values: dict[str, Any]) -> None:
    """Check the business rules on whichever job fields are present."""
    for name in _REQUIRED_TEXT_FIELDS:
        if name in values and not str(values[name] or "").strip():
            raise ValidationError(f"{name} must not be blank")
    for name in _NON_NULL_FIELDS:
        if name in values and values[name] is None:
            raise ValidationError(f"{name} must not be null")
    if "budget" in values:
        budget = values["budget"]
        if budget is None or not math.isfinite(budget) or budget <= 0:
            raise ValidationError("budget must be a finite number greater than 0")


def load_job(store: MarketplaceStore, job_id: str) -> Job:
    """Fetch a bare job record or raise ``NotFound``."""
    row = store.get_job(str(job_id))
    if row is None:
        raise NotFound(f"Job not found: {job_id}")
    return Job(**row)


def to_job_details(
    store: MarketplaceStore,
    jobs: Sequence[Job],
    now: datetime | None = None,
) -> list[JobDetail]:
    """Join each job with its customer summary and a relative time label."""
    customers = profile_summaries(store, {job.customer_id for job in jobs})
    return [
        JobDetail(
            **job.model_dump(),
            customer=customers.get(job.customer_id),
            time_ago=format_time_ago(job.created_at, now),
        )
        for job in jobs
    ]


def create_job(
    store: MarketplaceStore,
    customer_id: str,
    fields: JobCreate,
    now: datetime | None = None,
) -> Job:
    """Post a new job for *customer_id* with ``status=open``."""
    customer = get_profile(store, customer_id)
    if customer.user_type != UserType.customer:
        raise PermissionDenied("Only customer profiles can post jobs")

    values = fields.model_dump(mode="json")
    _validate_job_fields(values)

    now = now or datetime.now(timezone.utc)
    row = {
        **values,
        "id": str(uuid4()),
        "customer_id": customer_id,
        "status": JobStatus.open.value,
        "created_at": now.isoformat(),
        "updated_at": now.isoformat(),
    }
    job = Job(**store.insert_job(row))

    logger.info(
        "job_created",
        extra={"job_id": str(job.id), "customer_id": customer_id, "budget": job.budget},
    )
    return job


def update_job(
    store: MarketplaceStore,
    job_id: str,
    actor_id: str,
    patch: JobUpdate,
    now: datetime | None = None,
) -> Job:
    """Edit a job's fields and/or move its status, as its owning customer.

    Raises ``InvalidTransition`` for backward, skipping or terminal moves,
    for ``open -> in_progress`` (reserved for bid acceptance) and when the
    job's status changed between the read and the write.
    """
    job = load_job(store, job_id)
    if job.customer_id != actor_id:
        raise PermissionDenied("Only the job owner can modify this job")

    changes = patch.model_dump(mode="json", exclude_unset=True)
    target = changes.pop("status", None)
    _validate_job_fields(changes)

    current = job.status.value
    if target is not None and target != current:
        if target not in JOB_TRANSITIONS.get(current, set()):
            raise InvalidTransition(f"Cannot move job from {current} to {target}")
        if target == JobStatus.in_progress.value:
            raise InvalidTransition("A job moves to in_progress only when a bid is accepted")
        changes["status"] = target
    elif changes and current not in JOB_TRANSITIONS:
        raise InvalidTransition(f"Job is {current} and can no longer be edited")

    if not changes:
        return job

    changes["updated_at"] = (now or datetime.now(timezone.utc)).isoformat()
    row = store.update_job(str(job.id), changes, expected_status=current)
    if row is None:
        logger.warning(
            "job_update_lost_race",
            extra={"job_id": str(job.id), "expected_status": current},
        )
        raise InvalidTransition(f"Job {job.id} is no longer {current}")

    updated = Job(**row)
    if updated.status != job.status:
        logger.info(
            "job_status_changed",
            extra={
                "job_id": str(job.id),
                "from_status": current,
                "to_status": updated.status.value,
            },
        )
    return updated


def get_job(
    store: MarketplaceStore,
    job_id: str,
    now: datetime | None = None,
) -> JobDetail:
    """Return a job joined with its customer summary, or raise ``NotFound``."""
    return to_job_details(store, [load_job(store, job_id)], now)[0]


def list_customer_jobs(
    store: MarketplaceStore,
    customer_id: str,
    now: datetime | None = None,
) -> list[JobDetail]:
    """Return every job posted by *customer_id*, newest first."""
    jobs = newest_first(Job(**row) for row in store.select_jobs(customer_id=customer_id))
    return to_job_details(store, jobs, now)
