"""Enum types mirroring the PostgreSQL custom enums in sql/schema.sql."""

from enum import Enum


class UserType(str, Enum):
    """Role a profile acts in for write operations."""
    customer = "customer"
    provider = "provider"


class JobStatus(str, Enum):
    """Lifecycle status of a job."""
    open = "open"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class BidStatus(str, Enum):
    """Lifecycle status of a bid."""
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class BudgetType(str, Enum):
    """How the job budget is quoted."""
    fixed = "fixed"
    hourly = "hourly"


class Urgency(str, Enum):
    """Customer-declared urgency of a job."""
    low = "low"
    medium = "medium"
    high = "high"


class BudgetRange(str, Enum):
    """Browse filter budget bands."""
    under_100 = "under-100"
    from_100_to_500 = "100-500"
    from_500_to_1000 = "500-1000"
    over_1000 = "over-1000"


class ActivityType(str, Enum):
    """Kind of entry in the provider activity feed."""
    bid_submitted = "bid_submitted"
    bid_accepted = "bid_accepted"
