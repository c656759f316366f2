"""Storefront retrieval for the authenticated account.

Fetches the daily offer panel and featured bundle, maps identifiers through
the catalog and converts remaining-seconds counters into absolute expiries.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from valstore.auth import AuthProvider
from valstore.catalog import Catalog, CatalogStore
from valstore.config import Config
from valstore.exceptions import CatalogMismatchError, NotFoundError, UpstreamError
from valstore.models.auth import CredentialBundle
from valstore.models.store import (
    CatalogEntry,
    FeaturedBundle,
    RawFeaturedBundle,
    RawStorefront,
    StoreOffer,
    StorefrontOfferSet,
)
from valstore.tls import DEFAULT_TIMEOUT, build_http_client

logger = logging.getLogger(__name__)


STOREFRONT_PATH = "/store/v2/storefront/{subject_id}"
ENTITLEMENT_HEADER = "X-Riot-Entitlements-JWT"


class Storefront:
    """Reads the account's storefront through an AuthProvider."""

    def __init__(
        self,
        auth: AuthProvider,
        catalog: CatalogStore,
        storefront_endpoint: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._auth = auth
        self._catalog = catalog
        self._endpoint = storefront_endpoint.rstrip("/")
        self._clock = clock
        self._http = build_http_client(timeout)

    @classmethod
    def from_config(cls, config: Config, auth: AuthProvider, **kwargs: Any) -> Storefront:
        """Build a storefront for the configured shard and catalog path."""
        return cls(
            auth,
            CatalogStore(config.settings.catalog_path),
            config.get_shard().storefront_endpoint,
            timeout=config.settings.timeout,
            **kwargs,
        )

    def get_offers(self) -> StorefrontOfferSet:
        """Fetch and normalize the current storefront.

        Raises:
            AuthError: Propagated from the auth provider.
            UpstreamError: Transport failure, error status or unexpected shape.
            CatalogMismatchError: An offer id is missing from the catalog.
        """
        bundle = self._auth.get_bundle()
        raw = self._fetch(bundle)

        # Every expiry is relative to this one instant
        now = self._clock()
        catalog = self._catalog.snapshot()

        offers = []
        for offer_id in raw.skins_panel.single_item_offers:
            offers.append(StoreOffer(offer_id=offer_id, entry=_lookup(catalog, offer_id)))

        featured = None
        if raw.featured_bundle is not None:
            featured = _featured_bundle(catalog, raw.featured_bundle, now)

        return StorefrontOfferSet(
            remaining_offers=offers,
            offers_expiry=now + timedelta(seconds=raw.skins_panel.remaining_seconds),
            featured_bundle=featured,
            retrieved_at=now,
        )

    def _fetch(self, bundle: CredentialBundle) -> RawStorefront:
        url = self._endpoint + STOREFRONT_PATH.format(subject_id=bundle.subject_id)
        headers = {
            ENTITLEMENT_HEADER: bundle.entitlement_token,
            "Authorization": f"Bearer {bundle.access_token}",
        }
        logger.info(f"GET {url}")

        try:
            response = self._http.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Storefront request timed out: {url}", stage="transport") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Storefront request failed: {e}", stage="transport") from e

        if response.status_code >= 400:
            raise UpstreamError(
                f"Storefront error (HTTP {response.status_code}): {response.text}",
                stage="http",
                status_code=response.status_code,
            )

        try:
            return RawStorefront.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamError(f"Unexpected storefront response shape: {e}", stage="shape") from e

    def close(self) -> None:
        """Close the underlying HTTP client and the auth provider."""
        self._http.close()
        self._auth.close()


def _lookup(catalog: Catalog, item_id: str) -> CatalogEntry:
    try:
        return catalog.lookup(item_id)
    except NotFoundError as e:
        raise CatalogMismatchError(item_id) from e


def _featured_bundle(catalog: Catalog, raw: RawFeaturedBundle, now: datetime) -> FeaturedBundle:
    entry = _lookup(catalog, raw.bundle.data_asset_id)
    return FeaturedBundle(
        bundle_id=raw.bundle.data_asset_id,
        name=entry.display_name,
        image=entry.image,
        expires_at=now + timedelta(seconds=raw.remaining_seconds),
    )


def format_remaining(seconds: float) -> str:
    """Render a remaining duration as HH:MM:SS (hours are not wrapped)."""
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
