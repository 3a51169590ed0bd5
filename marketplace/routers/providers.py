"""Provider dashboard endpoints and the category catalogue."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from marketplace.core.constants import SERVICE_CATEGORIES
from marketplace.db.base import MarketplaceStore
from marketplace.db.store import get_store
from marketplace.models.bid import ProviderBid
from marketplace.models.profile import Profile
from marketplace.models.stats import ProviderStats, ServiceCategory
from marketplace.routers.deps import current_profile
from marketplace.services.bids import list_bids_for_provider
from marketplace.services.stats import get_provider_stats

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/providers/me/stats", response_model=ProviderStats)
def my_stats(
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> ProviderStats:
    """Return the caller's earnings, active bids and recent activity."""
    return get_provider_stats(store, profile.id)


@router.get("/providers/me/bids", response_model=list[ProviderBid])
def my_bids(
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> list[ProviderBid]:
    """Return the caller's bids with the jobs they were placed on."""
    return list_bids_for_provider(store, profile.id)


@router.get("/categories", response_model=list[ServiceCategory])
def categories() -> list[ServiceCategory]:
    """Return the service category catalogue."""
    return [ServiceCategory(**category) for category in SERVICE_CATEGORIES]
