"""Marketplace query engine: browse and search over open jobs.

Filtering is evaluated in Python on top of the coarse exact-match columns
the store can push down (status, category), so every backend returns the
same result for the same ``JobFilters``.  Nothing here writes to the store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from marketplace.core.constants import BUDGET_BANDS
from marketplace.db.base import MarketplaceStore
from marketplace.models.enums import BudgetRange
from marketplace.models.job import Job, JobDetail, JobFilters
from marketplace.services.jobs import newest_first, to_job_details

logger = logging.getLogger(__name__)


def in_budget_range(budget: float, budget_range: BudgetRange) -> bool:
    """Return True when *budget* falls inside the band.

    ``100-500`` and ``500-1000`` include both ends; ``under-100`` and
    ``over-1000`` exclude the boundary.
    """
    lower, upper, lower_inclusive, upper_inclusive = BUDGET_BANDS[budget_range.value]
    if lower is not None:
        if budget < lower or (budget == lower and not lower_inclusive):
            return False
    if upper is not None:
        if budget > upper or (budget == upper and not upper_inclusive):
            return False
    return True


def matches(job: Job, filters: JobFilters) -> bool:
    """Return True when *job* satisfies every filter that is set."""
    if filters.status is not None and job.status != filters.status:
        return False
    if filters.category and job.category != filters.category:
        return False
    if filters.location and filters.location.lower() not in job.location.lower():
        return False
    if filters.search:
        needle = filters.search.lower()
        if needle not in job.title.lower() and needle not in job.description.lower():
            return False
    if filters.budget_range is not None and not in_budget_range(
        job.budget, filters.budget_range
    ):
        return False
    return True


def filter_jobs(jobs: Iterable[Job], filters: JobFilters) -> list[Job]:
    """Apply *filters* and order newest first (ties by id)."""
    return newest_first(job for job in jobs if matches(job, filters))


def list_jobs(
    store: MarketplaceStore,
    filters: JobFilters | None = None,
    now: datetime | None = None,
) -> list[JobDetail]:
    """Return the jobs matching *filters*, newest first, with customer summaries."""
    filters = filters or JobFilters()
    rows = store.select_jobs(
        status=filters.status.value if filters.status is not None else None,
        category=filters.category or None,
    )
    jobs = filter_jobs((Job(**row) for row in rows), filters)

    logger.debug(
        "jobs_listed",
        extra={"filters": filters.model_dump(mode="json", exclude_none=True), "count": len(jobs)},
    )
    return to_job_details(store, jobs, now)
