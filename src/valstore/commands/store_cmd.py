"""CLI commands for the account storefront."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

import typer
from rich.console import Console

from valstore.config import get_config
from valstore.auth import PasswordAuthProvider
from valstore.exceptions import ValstoreError
from valstore.models.store import StorefrontOfferSet
from valstore.storefront import Storefront, format_remaining
from valstore.utils.errors import handle_error
from valstore.utils.output import OutputFormat, print_json, print_table

console = Console(stderr=True)
app = typer.Typer(name="store", help="Show the daily storefront.")


@app.command("offers")
def offers(
    shard: Annotated[str | None, typer.Option("--shard", "-s", help="Override the configured shard")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show today's offers and the featured bundle."""
    config = get_config()
    if shard:
        config = config.model_copy(update={"settings": config.settings.model_copy(update={"shard": shard})})

    try:
        config.get_shard()
        auth = PasswordAuthProvider.from_config(config)
    except (ValstoreError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)

    try:
        storefront = Storefront.from_config(config, auth)
    except (ValstoreError, ValueError) as e:
        auth.close()
        handle_error(e)
        raise typer.Exit(1)

    try:
        offer_set = storefront.get_offers()
        if output == OutputFormat.JSON:
            print_json(_to_json(offer_set, datetime.now()))
        else:
            _print_offers(offer_set, datetime.now())
    except ValstoreError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        storefront.close()


def _to_json(offer_set: StorefrontOfferSet, now: datetime) -> dict[str, Any]:
    data = offer_set.model_dump(mode="json")
    data["time_remaining"] = format_remaining((offer_set.offers_expiry - now).total_seconds())
    if offer_set.featured_bundle is not None:
        data["featured_bundle"]["time_remaining"] = format_remaining(
            (offer_set.featured_bundle.expires_at - now).total_seconds()
        )
    return data


def _print_offers(offer_set: StorefrontOfferSet, now: datetime) -> None:
    rows = [
        {"slot": i, "name": offer.entry.display_name, "offer_id": offer.offer_id, "image": offer.entry.image}
        for i, offer in enumerate(offer_set.remaining_offers, start=1)
    ]
    remaining = format_remaining((offer_set.offers_expiry - now).total_seconds())
    print_table(rows, title=f"Daily offers (resets in {remaining})")

    bundle = offer_set.featured_bundle
    if bundle is not None:
        bundle_remaining = format_remaining((bundle.expires_at - now).total_seconds())
        console.print(f"Featured bundle: [bold]{bundle.name}[/bold] (ends in {bundle_remaining})")
