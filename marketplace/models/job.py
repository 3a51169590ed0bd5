"""Pydantic models for the ``jobs`` table and the browse query."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from marketplace.models.enums import BudgetRange, BudgetType, JobStatus, Urgency
from marketplace.models.profile import ProfileSummary


class JobCreate(BaseModel):
    """Job creation input from the post-a-job form.

    Only shape is checked here; ``services.jobs`` enforces the business
    rules (positive budget, non-blank text fields).
    """
    title: str
    description: str
    category: str
    subcategory: str | None = None
    budget: float
    budget_type: BudgetType = BudgetType.fixed
    location: str
    urgency: Urgency = Urgency.medium
    requirements: list[str] = []
    images: list[str] = []


class JobUpdate(BaseModel):
    """Patch for an existing job.  ``customer_id`` cannot be expressed."""
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    category: str | None = None
    subcategory: str | None = None
    budget: float | None = None
    budget_type: BudgetType | None = None
    location: str | None = None
    urgency: Urgency | None = None
    requirements: list[str] | None = None
    images: list[str] | None = None
    status: JobStatus | None = None


class Job(BaseModel):
    """Full job record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: str
    title: str
    description: str
    category: str
    subcategory: str | None = None
    budget: float
    budget_type: BudgetType
    location: str
    urgency: Urgency
    status: JobStatus
    requirements: list[str] = []
    images: list[str] = []
    created_at: datetime
    updated_at: datetime


class JobDetail(Job):
    """Job joined with its customer summary, as shown in listings."""
    customer: ProfileSummary | None = None
    time_ago: str = ""


class JobSummary(BaseModel):
    """Job fields joined into a provider's bid listing."""
    id: UUID
    title: str
    description: str
    budget: float
    budget_type: BudgetType
    location: str
    status: JobStatus


class JobFilters(BaseModel):
    """Browse query.  Every field is optional; set fields AND together."""
    status: JobStatus | None = None
    category: str | None = None
    location: str | None = None
    search: str | None = None
    budget_range: BudgetRange | None = None
