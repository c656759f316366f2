"""Structured error handling for agent-friendly output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

from valstore.exceptions import (
    AuthError,
    AuthFailure,
    CatalogMismatchError,
    CatalogUnavailableError,
    UpstreamError,
)

console = Console(stderr=True)

# Actionable hints keyed by auth failure reason
_AUTH_HINTS: dict[AuthFailure, str] = {
    AuthFailure.MISSING_CREDENTIALS: "Set VALSTORE_USERNAME and VALSTORE_PASSWORD in your .env file",
    AuthFailure.INVALID_CREDENTIALS: "Check the account username and password",
    AuthFailure.MULTIFACTOR_REQUIRED: "Disable multifactor login for this account or sign in interactively",
    AuthFailure.MISSING_SESSION_COOKIE: "Riot auth rejected the client; the TLS profile or user agent may be outdated",
    AuthFailure.RATE_LIMITED: "Too many logins — wait a few minutes before retrying",
    AuthFailure.TIMEOUT: "Request timed out — try again or check network connectivity",
    AuthFailure.NETWORK: "Connection error — check network connectivity",
}

# Hints for everything else, keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("not in the catalog", "Catalog is out of date — run `valstore catalog refresh`"),
    ("snapshot", "Run `valstore catalog refresh` to create the catalog snapshot"),
    ("unknown shard", "Check VALSTORE_SHARD against config/shards.yaml"),
    ("response shape", "The storefront response changed shape — the client may need updating"),
    ("401", "Riot rejected the tokens — run `valstore auth login` to re-authenticate"),
    ("timed out", "Request timed out — try again or check network connectivity"),
    ("connection", "Connection error — check network connectivity"),
]


def _get_hint(error: Exception) -> str | None:
    """Match an error to an actionable hint."""
    if isinstance(error, AuthError):
        return _AUTH_HINTS.get(error.reason)
    lower = str(error).lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception) -> str:
    """Classify an error so operators can tell which stage failed."""
    if isinstance(error, AuthError):
        return "AUTH_ERROR"
    if isinstance(error, CatalogMismatchError):
        return "CATALOG_MISMATCH"
    if isinstance(error, UpstreamError):
        if error.stage == "transport" and "timed out" in str(error):
            return "TIMEOUT"
        return "UPSTREAM_ERROR"
    if isinstance(error, CatalogUnavailableError):
        return "CATALOG_UNAVAILABLE"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "AUTH_ERROR", "reason": "...", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(error)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _get_code(error),
        "message": message,
    }
    if isinstance(error, AuthError):
        error_obj["reason"] = error.reason.value
    elif isinstance(error, UpstreamError):
        error_obj["stage"] = error.stage
        if error.status_code is not None:
            error_obj["status_code"] = error.status_code
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    # Human-readable to stderr
    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
