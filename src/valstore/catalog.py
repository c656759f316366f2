"""Local catalog of item identifiers to display metadata.

The snapshot is a JSON file written by ``fetch_catalog``/``write_snapshot``
(the ``catalog refresh`` command) and read here for point lookups.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from valstore.exceptions import CatalogUnavailableError, NotFoundError
from valstore.models.store import CatalogEntry

logger = logging.getLogger(__name__)


CATALOG_API = "https://valorant-api.com/v1"


class Catalog:
    """Immutable snapshot of the catalog."""

    def __init__(self, entries: Mapping[str, CatalogEntry]) -> None:
        self._entries = dict(entries)

    def lookup(self, item_id: str) -> CatalogEntry:
        """Look up one identifier.

        Raises:
            NotFoundError: If the identifier is not in the snapshot.
        """
        try:
            return self._entries[item_id]
        except KeyError:
            raise NotFoundError(item_id) from None

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class CatalogStore:
    """Reads catalog snapshots from a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def snapshot(self) -> Catalog:
        """Load the current snapshot.

        Raises:
            CatalogUnavailableError: If the file is missing, unreadable or malformed.
        """
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise CatalogUnavailableError(
                f"Catalog snapshot not found at {self._path}. Run `valstore catalog refresh`."
            ) from None
        except (OSError, ValueError) as e:
            raise CatalogUnavailableError(f"Catalog snapshot at {self._path} is unreadable: {e}") from e

        if not isinstance(raw, dict):
            raise CatalogUnavailableError(f"Catalog snapshot at {self._path} is not a JSON object")

        try:
            entries = {item_id: CatalogEntry.model_validate(data) for item_id, data in raw.items()}
        except ValidationError as e:
            raise CatalogUnavailableError(f"Catalog snapshot at {self._path} is malformed: {e}") from e

        logger.debug(f"Loaded {len(entries)} catalog entries from {self._path}")
        return Catalog(entries)


# ── Refresh ──────────────────────────────────────────────────────────

def fetch_catalog(http: httpx.Client, base_url: str = CATALOG_API) -> dict[str, CatalogEntry]:
    """Fetch skins and bundles from the public reference API.

    Each skin is keyed by its first level's uuid, which is what the
    storefront returns as an offer id. Bundles are keyed by their uuid.
    """
    entries: dict[str, CatalogEntry] = {}

    skins = _get_data(http, f"{base_url}/weapons/skins")
    for skin in skins:
        levels = skin.get("levels") or []
        if not levels or not isinstance(levels[0], dict) or not levels[0].get("uuid"):
            continue
        level = levels[0]
        entries[level["uuid"]] = CatalogEntry(
            display_name=level.get("displayName") or skin.get("displayName") or "",
            image=level.get("displayIcon"),
        )

    bundles = _get_data(http, f"{base_url}/bundles")
    for bundle in bundles:
        if not bundle.get("uuid"):
            continue
        entries[bundle["uuid"]] = CatalogEntry(
            display_name=bundle.get("displayName") or "",
            image=bundle.get("displayIcon"),
        )

    logger.info(f"Fetched {len(entries)} catalog entries ({len(skins)} skins, {len(bundles)} bundles)")
    return entries


def write_snapshot(path: str | Path, entries: Mapping[str, CatalogEntry]) -> Path:
    """Write a catalog snapshot, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {item_id: entry.model_dump() for item_id, entry in entries.items()}
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def _get_data(http: httpx.Client, url: str) -> list[dict[str, Any]]:
    response = http.get(url)
    if response.status_code != 200:
        raise RuntimeError(f"Catalog fetch failed (HTTP {response.status_code}): {url}")
    try:
        body = response.json()
    except ValueError:
        raise RuntimeError(f"Catalog fetch failed (non-JSON body): {url}") from None
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, list):
        raise RuntimeError(f"Catalog fetch failed (unexpected body shape): {url}")
    return [item for item in data if isinstance(item, dict)]
