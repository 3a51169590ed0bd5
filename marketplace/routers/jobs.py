"""Job endpoints: post, browse, read, edit, and the bids placed on a job."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from marketplace.db.base import MarketplaceStore
from marketplace.db.store import get_store
from marketplace.models.bid import Bid, BidCreate, JobBid
from marketplace.models.enums import BudgetRange, JobStatus
from marketplace.models.job import Job, JobCreate, JobDetail, JobFilters, JobUpdate
from marketplace.models.profile import Profile
from marketplace.routers.deps import current_profile
from marketplace.services.bids import create_bid, list_bids_for_job
from marketplace.services.jobs import (
    create_job,
    get_job,
    list_customer_jobs,
    update_job,
)
from marketplace.services.marketplace import list_jobs

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=Job, status_code=201)
def post_job(
    fields: JobCreate,
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Job:
    """Post a new job as the calling customer."""
    return create_job(store, profile.id, fields)


@router.get("", response_model=list[JobDetail])
def browse_jobs(
    status: JobStatus | None = Query(default=None, description="Exact status"),
    category: str | None = Query(default=None, description="Exact category id"),
    location: str | None = Query(default=None, description="Substring, any case"),
    search: str | None = Query(
        default=None,
        description="Substring of title or description, any case",
    ),
    budget_range: BudgetRange | None = Query(default=None, description="Budget band"),
    _: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> list[JobDetail]:
    """Browse jobs, newest first.  All filters are optional and combine with AND."""
    filters = JobFilters(
        status=status,
        category=category,
        location=location,
        search=search,
        budget_range=budget_range,
    )
    return list_jobs(store, filters)


@router.get("/mine", response_model=list[JobDetail])
def my_jobs(
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> list[JobDetail]:
    """Return the jobs posted by the caller."""
    return list_customer_jobs(store, profile.id)


@router.get("/{job_id}", response_model=JobDetail)
def read_job(
    job_id: UUID,
    _: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> JobDetail:
    """Return one job with its customer summary."""
    return get_job(store, str(job_id))


@router.patch("/{job_id}", response_model=Job)
def edit_job(
    job_id: UUID,
    patch: JobUpdate,
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Job:
    """Edit fields or move the status of one of the caller's jobs."""
    return update_job(store, str(job_id), profile.id, patch)


@router.get("/{job_id}/bids", response_model=list[JobBid])
def job_bids(
    job_id: UUID,
    _: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> list[JobBid]:
    """Return the bids on a job with provider and reputation summaries."""
    return list_bids_for_job(store, str(job_id))


@router.post("/{job_id}/bids", response_model=Bid, status_code=201)
def place_bid(
    job_id: UUID,
    fields: BidCreate,
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Bid:
    """Submit the caller's bid on an open job."""
    return create_bid(store, str(job_id), profile.id, fields)
