"""Session start and profile endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from marketplace.db.base import MarketplaceStore
from marketplace.db.store import get_store
from marketplace.models.profile import Profile, ProfileUpdate
from marketplace.routers.deps import current_profile
from marketplace.services.profiles import get_profile, update_profile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/session", response_model=Profile)
def start_session(profile: Profile = Depends(current_profile)) -> Profile:
    """Provision the caller's profile on session start and return it."""
    return profile


@router.get("/profiles/me", response_model=Profile)
def read_own_profile(profile: Profile = Depends(current_profile)) -> Profile:
    """Return the caller's profile."""
    return profile


@router.patch("/profiles/me", response_model=Profile)
def edit_own_profile(
    patch: ProfileUpdate,
    profile: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Profile:
    """Edit the caller's contact fields."""
    return update_profile(store, profile.id, patch)


@router.get("/profiles/{profile_id}", response_model=Profile)
def read_profile(
    profile_id: str,
    _: Profile = Depends(current_profile),
    store: MarketplaceStore = Depends(get_store),
) -> Profile:
    """Return any profile by id."""
    return get_profile(store, profile_id)
