"""Tests for models — raw storefront parsing and bundle immutability."""
from datetime import datetime

import pytest
from pydantic import ValidationError

from valstore.models.auth import CredentialBundle
from valstore.models.store import CatalogEntry, RawStorefront


def test_raw_storefront_aliases():
    raw = RawStorefront.model_validate({
        "FeaturedBundle": {
            "Bundle": {"DataAssetID": "b-1"},
            "BundleRemainingDurationInSeconds": 120,
        },
        "SkinsPanelLayout": {
            "SingleItemOffers": ["a", "b", "c", "d"],
            "SingleItemOffersRemainingDurationInSeconds": 3600,
        },
    })
    assert raw.skins_panel.single_item_offers == ["a", "b", "c", "d"]
    assert raw.skins_panel.remaining_seconds == 3600
    assert raw.featured_bundle.bundle.data_asset_id == "b-1"
    assert raw.featured_bundle.remaining_seconds == 120


def test_raw_storefront_without_bundle():
    raw = RawStorefront.model_validate({
        "SkinsPanelLayout": {
            "SingleItemOffers": [],
            "SingleItemOffersRemainingDurationInSeconds": 0,
        },
    })
    assert raw.featured_bundle is None


def test_negative_remaining_seconds_rejected():
    with pytest.raises(ValidationError):
        RawStorefront.model_validate({
            "SkinsPanelLayout": {
                "SingleItemOffers": ["a"],
                "SingleItemOffersRemainingDurationInSeconds": -1,
            },
        })


def test_bundle_is_frozen():
    bundle = CredentialBundle(
        access_token="a", entitlement_token="e", subject_id="s", expires_at=datetime(2026, 1, 1),
    )
    with pytest.raises(ValidationError):
        bundle.access_token = "b"


def test_catalog_entry_alias():
    assert CatalogEntry.model_validate({"displayName": "Ghost", "image": None}).display_name == "Ghost"
