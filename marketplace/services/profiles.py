"""Identity and profile provisioning.

``ensure_profile`` runs at session start and guarantees that every
authenticated identity maps to exactly one ``profiles`` row, including when
two sessions for the same identity start at the same moment.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from marketplace.core.errors import NotFound, ProvisioningFailed, ValidationError
from marketplace.db.base import DuplicateKeyError, MarketplaceStore, StoreError
from marketplace.models.enums import UserType
from marketplace.models.profile import (
    Identity,
    Profile,
    ProfileCreate,
    ProfileSummary,
    ProfileUpdate,
)

logger = logging.getLogger(__name__)


def _default_display_name(identity: Identity) -> str:
    if identity.display_name and identity.display_name.strip():
        return identity.display_name.strip()
    return identity.email.split("@")[0]


def ensure_profile(
    store: MarketplaceStore,
    identity: Identity,
    now: datetime | None = None,
) -> Profile:
    """Return the profile for *identity*, creating it on first login.

    Creation goes through the store's insert-if-absent primitive, so a
    concurrent creator's row is returned instead of a second one being
    written.  A uniqueness violation is answered with a re-fetch.  When
    neither the create nor the re-fetch yields a row the session is blocked
    with ``ProvisioningFailed``.
    """
    try:
        existing = store.get_profile(identity.id)
    except StoreError as exc:
        raise ProvisioningFailed(f"Could not load profile {identity.id}: {exc}") from exc
    if existing is not None:
        return Profile(**existing)

    now = now or datetime.now(timezone.utc)
    payload = ProfileCreate(
        id=identity.id,
        email=identity.email,
        display_name=_default_display_name(identity),
        user_type=identity.user_type or UserType.customer,
        created_at=now,
        updated_at=now,
    )

    try:
        row = store.insert_profile_if_absent(payload.model_dump(mode="json"))
    except DuplicateKeyError:
        logger.info("profile_create_raced", extra={"profile_id": identity.id})
        row = _refetch(store, identity.id)
    except StoreError as exc:
        logger.warning(
            "profile_create_failed",
            extra={"profile_id": identity.id, "error_message": str(exc)},
        )
        row = _refetch(store, identity.id)

    if row is None:
        raise ProvisioningFailed(f"Profile for {identity.id} could not be created")

    logger.info(
        "profile_provisioned",
        extra={"profile_id": identity.id, "user_type": row.get("user_type")},
    )
    return Profile(**row)


def _refetch(store: MarketplaceStore, profile_id: str) -> dict | None:
    try:
        return store.get_profile(profile_id)
    except StoreError as exc:
        raise ProvisioningFailed(
            f"Profile for {profile_id} could not be created or fetched: {exc}"
        ) from exc


def get_profile(store: MarketplaceStore, profile_id: str) -> Profile:
    """Return the profile for *profile_id* or raise ``NotFound``."""
    row = store.get_profile(profile_id)
    if row is None:
        raise NotFound(f"Profile not found: {profile_id}")
    return Profile(**row)


def update_profile(
    store: MarketplaceStore,
    profile_id: str,
    patch: ProfileUpdate,
    now: datetime | None = None,
) -> Profile:
    """Apply contact-field edits to a profile."""
    changes = patch.model_dump(mode="json", exclude_unset=True)
    if "display_name" in changes and not (changes["display_name"] or "").strip():
        raise ValidationError("display_name must not be blank")

    if not changes:
        return get_profile(store, profile_id)

    changes["updated_at"] = (now or datetime.now(timezone.utc)).isoformat()
    row = store.update_profile(profile_id, changes)
    if row is None:
        raise NotFound(f"Profile not found: {profile_id}")
    return Profile(**row)


def profile_summaries(
    store: MarketplaceStore,
    profile_ids: set[str],
) -> dict[str, ProfileSummary]:
    """Fetch the counterpart summaries joined into listings, keyed by id."""
    summaries: dict[str, ProfileSummary] = {}
    for profile_id in profile_ids:
        row = store.get_profile(profile_id)
        if row is not None:
            summaries[profile_id] = ProfileSummary(**row)
    return summaries
