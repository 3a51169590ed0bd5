"""Pydantic models for the ``bids`` and ``service_providers`` tables."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from marketplace.models.enums import BidStatus
from marketplace.models.job import JobSummary
from marketplace.models.profile import ProfileSummary


class BidCreate(BaseModel):
    """Bid creation input from the bid form (job id comes from the URL)."""
    amount: float
    message: str
    estimated_duration: str


class Bid(BaseModel):
    """Full bid record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    provider_id: str
    amount: float
    message: str
    estimated_duration: str
    status: BidStatus
    created_at: datetime
    updated_at: datetime


class ProviderReputation(BaseModel):
    """Read-only reputation fields from ``service_providers``."""
    user_id: str
    rating: float = 0.0
    review_count: int = 0
    completed_jobs: int = 0
    verified: bool = False


class JobBid(Bid):
    """Bid as the job owner sees it: with the provider and reputation."""
    provider: ProfileSummary | None = None
    reputation: ProviderReputation
    time_ago: str = ""


class ProviderBid(Bid):
    """Bid as its provider sees it: with the job and its customer."""
    job: JobSummary | None = None
    customer: ProfileSummary | None = None
    time_ago: str = ""
