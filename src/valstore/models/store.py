"""Storefront and catalog data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# Riot always returns four daily offers
OFFER_SLOTS = 4


class CatalogEntry(BaseModel):
    display_name: str = Field(alias="displayName")
    image: str | None = None

    model_config = {"populate_by_name": True, "frozen": True}


class StoreOffer(BaseModel):
    offer_id: str
    entry: CatalogEntry


class FeaturedBundle(BaseModel):
    bundle_id: str
    name: str
    image: str | None = None
    expires_at: datetime


class StorefrontOfferSet(BaseModel):
    """Normalized storefront: expiries are absolute, never second counts."""
    remaining_offers: list[StoreOffer]
    offers_expiry: datetime
    featured_bundle: FeaturedBundle | None = None
    retrieved_at: datetime


# ── Raw storefront payload ───────────────────────────────────────────

class RawSkinsPanel(BaseModel):
    single_item_offers: list[str] = Field(alias="SingleItemOffers", max_length=OFFER_SLOTS)
    remaining_seconds: int = Field(alias="SingleItemOffersRemainingDurationInSeconds", ge=0)

    model_config = {"populate_by_name": True}


class RawBundle(BaseModel):
    data_asset_id: str = Field(alias="DataAssetID")

    model_config = {"populate_by_name": True}


class RawFeaturedBundle(BaseModel):
    bundle: RawBundle = Field(alias="Bundle")
    remaining_seconds: int = Field(alias="BundleRemainingDurationInSeconds", ge=0)

    model_config = {"populate_by_name": True}


class RawStorefront(BaseModel):
    skins_panel: RawSkinsPanel = Field(alias="SkinsPanelLayout")
    featured_bundle: RawFeaturedBundle | None = Field(default=None, alias="FeaturedBundle")

    model_config = {"populate_by_name": True}
