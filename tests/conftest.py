"""Shared fixtures for the valstore test suite."""
from __future__ import annotations

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import httpx
import pytest

from valstore.config import AuthEndpoints, Config, Settings, ShardProfile
from valstore.models.store import CatalogEntry


T0 = datetime(2026, 10, 19, 12, 0, 0)

ACCESS_TOKEN = "acc-tok-123"
REDIRECT_URI = (
    "https://playvalorant.com/opt_in#access_token=acc-tok-123"
    "&scope=account+openid&iss=https%3A%2F%2Fauth.riotgames.com"
    "&id_token=id-tok&token_type=Bearer&session_state=abc&expires_in=3600"
)

OFFER_IDS = [
    "5ac106cd-45ef-a26f-2058-f382f20c64db",
    "12831559-44ac-c2da-0c6c-3db8a1ab8b2c",
    "e1e6f5b4-4ab0-3c21-0f53-ba8a4e1a8ea1",
    "f59b8a9a-4b2a-9a3c-3a56-2fa4ea6a3b7b",
]
BUNDLE_ID = "2116a38e-4b71-f169-0d16-ce9289af4bfa"


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_response(status_code=200, json_data=None, cookies=None, text=""):
    """Build a fake httpx.Response."""
    r = MagicMock(spec=httpx.Response)
    r.status_code = status_code
    r.text = text
    r.cookies = cookies or {}
    r.json.return_value = json_data if json_data is not None else {}
    return r


def handshake_responses(uri=REDIRECT_URI, entitlement="ent-tok-456", sub="puuid-789"):
    """Responses for bootstrap, credential submission, entitlement and userinfo."""
    return {
        "bootstrap": make_response(200, {"type": "auth"}, cookies={"clid": "uw1", "asid": "sess-1"}),
        "submit": make_response(200, {"type": "response", "response": {"parameters": {"uri": uri}}}),
        "entitlement": make_response(200, {"entitlements_token": entitlement}),
        "userinfo": make_response(200, {"sub": sub, "country": "usa"}),
    }


def wire_handshake(http: MagicMock, responses: dict | None = None) -> dict:
    """Point a mocked httpx client at a full set of handshake responses."""
    responses = responses or handshake_responses()
    http.post.side_effect = [responses["bootstrap"], responses["entitlement"]]
    http.put.return_value = responses["submit"]
    http.get.return_value = responses["userinfo"]
    return responses


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        username="player@example.com",
        password="hunter2",
        shard="na",
        language="en_US",
        catalog_path="./test-data/catalog.json",
        timeout=5.0,
    )


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(
        settings=fake_settings,
        auth=AuthEndpoints(),
        shards={
            "na": ShardProfile(storefront_endpoint="https://pd.na.a.pvp.net"),
            "eu": ShardProfile(storefront_endpoint="https://pd.eu.a.pvp.net"),
        },
    )


@pytest.fixture
def catalog_entries() -> dict[str, CatalogEntry]:
    return {
        OFFER_IDS[0]: CatalogEntry(display_name="Prime Vandal", image="https://media/prime-vandal.png"),
        OFFER_IDS[1]: CatalogEntry(display_name="Reaver Operator", image="https://media/reaver-op.png"),
        OFFER_IDS[2]: CatalogEntry(display_name="Glitchpop Phantom", image="https://media/glitch-phantom.png"),
        OFFER_IDS[3]: CatalogEntry(display_name="Ion Sheriff", image=None),
        BUNDLE_ID: CatalogEntry(display_name="Champions 2026", image="https://media/champions.png"),
    }
