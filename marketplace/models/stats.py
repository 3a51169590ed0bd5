"""Response models for the provider dashboard and the category catalogue.

These are API-layer response schemas, not direct table mappings.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from marketplace.models.enums import ActivityType


class ActivityItem(BaseModel):
    """One entry in the provider's recent activity feed."""
    bid_id: UUID
    type: ActivityType
    title: str
    amount: float
    created_at: datetime
    time_ago: str


class ProviderStats(BaseModel):
    """Full response for GET /api/v1/providers/me/stats."""
    provider_id: str
    active_bids: int = 0
    total_earnings: float = 0.0
    completed_jobs: int = 0
    rating: float = 0.0
    recent_activity: list[ActivityItem] = []


class ServiceCategory(BaseModel):
    """A category offered in the post-a-job form."""
    id: str
    name: str
    description: str
    subcategories: list[str] = []
