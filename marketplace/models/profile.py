"""Pydantic models for the ``profiles`` table and the authenticated identity."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from marketplace.models.enums import UserType


class Identity(BaseModel):
    """Authenticated identity handed over by the auth layer at session start."""
    id: str
    email: str
    display_name: str | None = None
    user_type: UserType | None = None  # sign-up metadata, if any


class ProfileCreate(BaseModel):
    """Payload for inserting a new profile."""
    id: str
    email: str
    display_name: str
    user_type: UserType = UserType.customer
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    """Editable contact fields.  ``user_type`` and ``email`` are fixed."""
    model_config = ConfigDict(extra="forbid")

    display_name: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
    location: str | None = None


class Profile(BaseModel):
    """Full profile record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: str | None = None
    user_type: UserType
    avatar_url: str | None = None
    phone: str | None = None
    location: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ProfileSummary(BaseModel):
    """Counterpart profile joined into job and bid listings."""
    id: str
    display_name: str | None = None
    email: str
    avatar_url: str | None = None
