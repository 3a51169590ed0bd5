"""Shared FastAPI dependencies.

The fronting auth layer forwards the authenticated identity in ``X-User-*``
headers.  ``current_profile`` provisions the caller's profile before any
marketplace operation runs; a ``ProvisioningFailed`` there blocks the
request with 503.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from marketplace.db.base import MarketplaceStore
from marketplace.db.store import get_store
from marketplace.models.enums import UserType
from marketplace.models.profile import Identity, Profile
from marketplace.services.profiles import ensure_profile


def current_identity(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_display_name: str | None = Header(default=None),
    x_user_type: UserType | None = Header(default=None),
) -> Identity:
    """Build the caller's identity from the auth headers (401 if absent)."""
    if not x_user_id or not x_user_email:
        raise HTTPException(status_code=401, detail="Authentication required")
    return Identity(
        id=x_user_id,
        email=x_user_email,
        display_name=x_user_display_name,
        user_type=x_user_type,
    )


def current_profile(
    identity: Identity = Depends(current_identity),
    store: MarketplaceStore = Depends(get_store),
) -> Profile:
    """Resolve (and on first login create) the caller's profile."""
    return ensure_profile(store, identity)
