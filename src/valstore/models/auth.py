"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel


class CredentialBundle(BaseModel):
    """Access token, entitlement token and subject id issued by one handshake."""
    access_token: str
    entitlement_token: str
    subject_id: str
    expires_at: datetime

    model_config = {"frozen": True}


class BundleStatus(BaseModel):
    """Current state of the cached credential bundle."""
    has_bundle: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
    subject_id: str | None = None
