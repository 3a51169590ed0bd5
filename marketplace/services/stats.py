"""Provider dashboard statistics.

Derived from the provider's bids on every call; nothing is cached or
persisted.
"""

from __future__ import annotations

import logging
from datetime import datetime

from marketplace.core.constants import RECENT_ACTIVITY_LIMIT
from marketplace.core.timeago import format_time_ago
from marketplace.db.base import MarketplaceStore
from marketplace.models.bid import Bid
from marketplace.models.enums import ActivityType, BidStatus
from marketplace.models.stats import ActivityItem, ProviderStats
from marketplace.services.jobs import newest_first

logger = logging.getLogger(__name__)


def get_provider_stats(
    store: MarketplaceStore,
    provider_id: str,
    now: datetime | None = None,
) -> ProviderStats:
    """Compute active bids, earnings and the recent activity feed.

    ``active_bids`` counts pending bids, ``total_earnings`` sums accepted
    amounts, ``recent_activity`` holds the three newest bids.
    ``completed_jobs`` and ``rating`` come from the provider's
    ``service_providers`` row and read as zero when it is missing.
    """
    bids = newest_first(Bid(**row) for row in store.select_bids(provider_id=provider_id))

    active_bids = sum(1 for bid in bids if bid.status == BidStatus.pending)
    total_earnings = sum(bid.amount for bid in bids if bid.status == BidStatus.accepted)

    recent_activity: list[ActivityItem] = []
    for bid in bids[:RECENT_ACTIVITY_LIMIT]:
        job = store.get_job(str(bid.job_id))
        recent_activity.append(
            ActivityItem(
                bid_id=bid.id,
                type=(
                    ActivityType.bid_accepted
                    if bid.status == BidStatus.accepted
                    else ActivityType.bid_submitted
                ),
                title=job["title"] if job else "Job",
                amount=bid.amount,
                created_at=bid.created_at,
                time_ago=format_time_ago(bid.created_at, now),
            )
        )

    reputation = store.get_provider_reputation(provider_id) or {}

    return ProviderStats(
        provider_id=provider_id,
        active_bids=active_bids,
        total_earnings=total_earnings,
        completed_jobs=int(reputation.get("completed_jobs") or 0),
        rating=float(reputation.get("rating") or 0.0),
        recent_activity=recent_activity,
    )
