"""Tests for utils/errors.py — stage classification and hint matching."""
import json

from valstore.exceptions import (
    AuthError,
    AuthFailure,
    CatalogMismatchError,
    CatalogUnavailableError,
    UpstreamError,
)
from valstore.utils.errors import _get_code, _get_hint, handle_error


# ── _get_hint ────────────────────────────────────────────────────────

def test_hint_invalid_credentials():
    assert "password" in _get_hint(AuthError(AuthFailure.INVALID_CREDENTIALS)).lower()


def test_hint_missing_credentials():
    assert "VALSTORE_USERNAME" in _get_hint(AuthError(AuthFailure.MISSING_CREDENTIALS))


def test_hint_catalog_mismatch():
    assert "catalog refresh" in _get_hint(CatalogMismatchError("abc"))


def test_hint_shape():
    err = UpstreamError("Unexpected storefront response shape: ...", stage="shape")
    assert _get_hint(err) is not None


def test_hint_no_match():
    assert _get_hint(RuntimeError("some random error")) is None


# ── _get_code ────────────────────────────────────────────────────────

def test_code_distinguishes_stages():
    assert _get_code(AuthError(AuthFailure.INVALID_CREDENTIALS)) == "AUTH_ERROR"
    assert _get_code(UpstreamError("bad shape", stage="shape")) == "UPSTREAM_ERROR"
    assert _get_code(CatalogMismatchError("abc")) == "CATALOG_MISMATCH"
    assert _get_code(CatalogUnavailableError("missing")) == "CATALOG_UNAVAILABLE"


def test_code_timeout():
    assert _get_code(UpstreamError("Storefront request timed out: x", stage="transport")) == "TIMEOUT"


# ── handle_error JSON output ─────────────────────────────────────────

def test_handle_error_auth_reason(capsys):
    handle_error(AuthError(AuthFailure.INVALID_CREDENTIALS, "auth_failure"))
    data = json.loads(capsys.readouterr().out)
    assert data["error"] is True
    assert data["code"] == "AUTH_ERROR"
    assert data["reason"] == "invalid credentials"
    assert data["message"] == "invalid credentials: auth_failure"
    assert "hint" in data


def test_handle_error_upstream_stage(capsys):
    handle_error(UpstreamError("Storefront error (HTTP 503): down", stage="http", status_code=503))
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "UPSTREAM_ERROR"
    assert data["stage"] == "http"
    assert data["status_code"] == 503


def test_handle_error_catalog_mismatch(capsys):
    handle_error(CatalogMismatchError("abc"))
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "CATALOG_MISMATCH"
    assert data["stage"] == "catalog"


def test_handle_error_generic_code(capsys):
    handle_error(RuntimeError("something went wrong"))
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "RUNTIME_ERROR"
    assert "hint" not in data
