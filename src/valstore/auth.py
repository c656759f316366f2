"""Riot username/password authentication.

Runs the authorization handshake, caches the resulting credential bundle
and re-runs the handshake once the bundle nears expiry.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Union
from urllib.parse import parse_qs, urlsplit

import httpx

from valstore.config import AuthEndpoints, Config
from valstore.exceptions import AuthError, AuthFailure
from valstore.models.auth import BundleStatus, CredentialBundle
from valstore.tls import DEFAULT_TIMEOUT, build_http_client

logger = logging.getLogger(__name__)


CLIENT_ID = "play-valorant-web-prod"
REDIRECT_URI = "https://playvalorant.com/opt_in"
SESSION_COOKIE_PREFIX = "asid"

# Riot access tokens live ~60 minutes; bundles are dropped 5 minutes early
DEFAULT_TOKEN_LIFETIME = timedelta(minutes=60)
EXPIRY_MARGIN = timedelta(minutes=5)


# ── Cache state ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class NoBundle:
    """Nothing cached yet."""


@dataclass(frozen=True)
class ValidBundle:
    """Cached bundle that can still be used."""
    bundle: CredentialBundle


@dataclass(frozen=True)
class ExpiredBundle:
    """Cached bundle past its expires_at; a new handshake is due."""
    bundle: CredentialBundle


BundleState = Union[NoBundle, ValidBundle, ExpiredBundle]


def bundle_state(bundle: CredentialBundle | None, now: datetime) -> BundleState:
    """Classify a cached bundle at ``now``."""
    if bundle is None:
        return NoBundle()
    if now < bundle.expires_at:
        return ValidBundle(bundle)
    return ExpiredBundle(bundle)


# ── Providers ────────────────────────────────────────────────────────

class AuthProvider(ABC):
    """Source of credential bundles for storefront calls."""

    @abstractmethod
    def get_bundle(self) -> CredentialBundle:
        """Return a bundle valid at the time of the call.

        Raises:
            AuthError: If no valid bundle can be obtained.
        """
        ...

    def close(self) -> None:
        """Release any resources held by the provider."""


class PasswordAuthProvider(AuthProvider):
    """Trades a username and password for a credential bundle."""

    def __init__(
        self,
        username: str,
        password: str,
        *,
        endpoints: AuthEndpoints | None = None,
        language: str = "en_US",
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if not username or not password:
            raise AuthError(
                AuthFailure.MISSING_CREDENTIALS,
                "username and password must both be set (VALSTORE_USERNAME / VALSTORE_PASSWORD)",
            )
        self._username = username
        self._password = password
        self._endpoints = endpoints or AuthEndpoints()
        self._language = language
        self._clock = clock
        self._bundle: CredentialBundle | None = None
        self._lock = threading.Lock()
        self._http = build_http_client(timeout)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> PasswordAuthProvider:
        """Build a provider from loaded configuration."""
        return cls(
            config.settings.username,
            config.settings.password,
            endpoints=config.auth,
            language=config.settings.language,
            timeout=config.settings.timeout,
            **kwargs,
        )

    def get_bundle(self, force_refresh: bool = False) -> CredentialBundle:
        """Get a valid credential bundle, running the handshake if needed.

        Args:
            force_refresh: Run the handshake even if the cached bundle is valid.

        Returns:
            A bundle whose expires_at is in the future.
        """
        seen = self._bundle
        state = bundle_state(seen, self._clock())
        if not force_refresh and isinstance(state, ValidBundle):
            logger.debug("Using cached credential bundle")
            return state.bundle

        with self._lock:
            # Another caller may have finished a handshake while we waited
            current = self._bundle
            state = bundle_state(current, self._clock())
            if isinstance(state, ValidBundle) and (not force_refresh or current is not seen):
                return state.bundle
            if isinstance(state, ExpiredBundle):
                logger.info("Credential bundle expired, re-authenticating")
            self._bundle = self._handshake()
            return self._bundle

    def get_status(self) -> BundleStatus:
        """Get the current bundle status without any network I/O."""
        now = self._clock()
        state = bundle_state(self._bundle, now)
        if isinstance(state, NoBundle):
            return BundleStatus(has_bundle=False, is_expired=True)

        bundle = state.bundle
        seconds_remaining = None
        if isinstance(state, ValidBundle):
            seconds_remaining = int((bundle.expires_at - now).total_seconds())

        return BundleStatus(
            has_bundle=True,
            is_expired=isinstance(state, ExpiredBundle),
            expires_at=bundle.expires_at,
            seconds_remaining=seconds_remaining,
            subject_id=bundle.subject_id,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    # ── Handshake steps ──────────────────────────────────────────────

    def _handshake(self) -> CredentialBundle:
        """Run bootstrap, credential submission, entitlement and identity steps."""
        self._http.cookies.clear()
        cookie = self._bootstrap()
        token, lifetime = self._submit_credentials(cookie)
        entitlement = self._exchange_entitlement(token)
        subject_id = self._resolve_identity(token)

        issued_at = self._clock()
        bundle = CredentialBundle(
            access_token=token,
            entitlement_token=entitlement,
            subject_id=subject_id,
            expires_at=issued_at + lifetime - EXPIRY_MARGIN,
        )
        logger.info(f"Authenticated as {subject_id}, bundle valid until {bundle.expires_at}")
        return bundle

    def _bootstrap(self) -> str:
        """Open an authorization session and return its session cookie header."""
        logger.info("Opening authorization session")
        response = self._send(
            "post",
            self._endpoints.authorization,
            json={
                "client_id": CLIENT_ID,
                "nonce": "1",
                "redirect_uri": REDIRECT_URI,
                "response_type": "token id_token",
            },
        )
        for name, value in response.cookies.items():
            if name.startswith(SESSION_COOKIE_PREFIX):
                return f"{name}={value}"
        raise AuthError(AuthFailure.MISSING_SESSION_COOKIE)

    def _submit_credentials(self, cookie: str) -> tuple[str, timedelta]:
        """Submit username/password; return the access token and its lifetime."""
        logger.info("Submitting credentials")
        response = self._send(
            "put",
            self._endpoints.authorization,
            json={
                "type": "auth",
                "username": self._username,
                "password": self._password,
                "remember": True,
                "language": self._language,
            },
            headers={"Cookie": cookie},
        )
        if response.status_code == 429:
            raise AuthError(AuthFailure.RATE_LIMITED, "credential submission was throttled")

        data = _json_body(response)
        if data.get("error"):
            raise AuthError(AuthFailure.INVALID_CREDENTIALS, str(data["error"]))
        if data.get("type") == "multifactor":
            raise AuthError(AuthFailure.MULTIFACTOR_REQUIRED)

        return extract_access_token(data)

    def _exchange_entitlement(self, access_token: str) -> str:
        logger.info("Exchanging access token for entitlement")
        response = self._send(
            "post",
            self._endpoints.entitlements,
            json={},
            headers={"Authorization": f"Bearer {access_token}"},
        )
        entitlement = _json_body(response).get("entitlements_token")
        if response.status_code >= 400 or not entitlement:
            raise AuthError(
                AuthFailure.ENTITLEMENT_EXCHANGE_FAILED, f"HTTP {response.status_code}"
            )
        return entitlement

    def _resolve_identity(self, access_token: str) -> str:
        logger.info("Resolving account identity")
        response = self._send(
            "get",
            self._endpoints.userinfo,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        subject_id = _json_body(response).get("sub")
        if response.status_code >= 400 or not subject_id:
            raise AuthError(
                AuthFailure.IDENTITY_RESOLUTION_FAILED, f"HTTP {response.status_code}"
            )
        return subject_id

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one request, mapping transport failures to AuthError."""
        try:
            return getattr(self._http, method)(url, **kwargs)
        except httpx.TimeoutException as e:
            raise AuthError(AuthFailure.TIMEOUT, f"{method.upper()} {url}") from e
        except httpx.HTTPError as e:
            raise AuthError(AuthFailure.NETWORK, str(e)) from e


def extract_access_token(data: dict[str, Any]) -> tuple[str, timedelta]:
    """Pull the access token out of the redirect URI fragment.

    The fragment is query-string encoded, e.g.
    ``#access_token=...&scope=openid&token_type=Bearer&expires_in=3600``.
    Falls back to the default lifetime when ``expires_in`` is absent or not
    longer than the expiry margin.
    """
    try:
        uri = data["response"]["parameters"]["uri"]
    except (KeyError, TypeError):
        raise AuthError(AuthFailure.TOKEN_EXTRACTION_FAILED, "no redirect uri in response") from None

    params = parse_qs(urlsplit(uri).fragment)
    tokens = params.get("access_token")
    if not tokens or not tokens[0]:
        raise AuthError(AuthFailure.TOKEN_EXTRACTION_FAILED, "no access_token in redirect fragment")

    lifetime = DEFAULT_TOKEN_LIFETIME
    expires_in = params.get("expires_in", [""])[0]
    if expires_in.isdigit() and timedelta(seconds=int(expires_in)) > EXPIRY_MARGIN:
        lifetime = timedelta(seconds=int(expires_in))
    return tokens[0], lifetime


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, returning {} for anything else."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
