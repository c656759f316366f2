"""Exception taxonomy for the auth handshake, storefront and catalog."""

from __future__ import annotations

from enum import Enum


class ValstoreError(Exception):
    """Base exception for valstore errors."""


class AuthFailure(str, Enum):
    """Reason codes for a failed credential exchange."""

    MISSING_CREDENTIALS = "missing credentials"
    MISSING_SESSION_COOKIE = "missing session cookie"
    INVALID_CREDENTIALS = "invalid credentials"
    MULTIFACTOR_REQUIRED = "multifactor required"
    TOKEN_EXTRACTION_FAILED = "token extraction failed"
    ENTITLEMENT_EXCHANGE_FAILED = "entitlement exchange failed"
    IDENTITY_RESOLUTION_FAILED = "identity resolution failed"
    RATE_LIMITED = "rate limited"
    TIMEOUT = "timeout"
    NETWORK = "network error"


class AuthError(ValstoreError):
    """Raised when the handshake fails at a specific step."""

    def __init__(self, reason: AuthFailure, detail: str = "") -> None:
        message = reason.value if not detail else f"{reason.value}: {detail}"
        super().__init__(message)
        self.reason = reason
        self.detail = detail


class UpstreamError(ValstoreError):
    """Raised when the storefront call fails or returns an unexpected shape.

    ``stage`` is one of ``transport``, ``http``, ``shape`` or ``catalog``.
    """

    def __init__(self, message: str, stage: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.status_code = status_code


class NotFoundError(ValstoreError):
    """Raised when an identifier is absent from the catalog snapshot."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"'{item_id}' is not in the catalog")
        self.item_id = item_id


class CatalogMismatchError(UpstreamError):
    """The storefront returned an identifier the catalog does not know."""

    def __init__(self, item_id: str) -> None:
        super().__init__(
            f"Storefront offer '{item_id}' is not in the catalog snapshot",
            stage="catalog",
        )
        self.item_id = item_id


class CatalogUnavailableError(ValstoreError):
    """Raised when the catalog snapshot is missing or unreadable."""
