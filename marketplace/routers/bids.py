"""Bid decision endpoints for the job owner.

POST /{bid_id}/accept -- accept a bid; 409 ``job_not_open`` if another bid
                         on the same job won first.
POST /{bid_id}/reject -- reject a pending bid.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from marketplace.core.config import settings
from marketplace.db.base import MarketplaceStore
from marketplace.db.store import get_store
from marketplace.models.bid import Bid
from marketplace.models.profile import Profile
from marketplace.routers.deps import current_profile
from marketplace.services.bids import accept_bid, reject_bid

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{bid_id}/accept", response_model=Bid)
def accept(
    bid_id: UUID,
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Bid:
    """Accept a bid and move its job to in_progress."""
    return accept_bid(
        store,
        str(bid_id),
        profile.id,
        auto_reject_siblings=settings.AUTO_REJECT_SIBLING_BIDS,
    )


@router.post("/{bid_id}/reject", response_model=Bid)
def reject(
    bid_id: UUID,
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Bid:
    """Reject a pending bid."""
    return reject_bid(store, str(bid_id), profile.id)
