"""valstore CLI entry point.

Logs into a Riot account and shows its VALORANT daily storefront.
"""

from __future__ import annotations

import logging

import typer

from valstore.commands.auth_cmd import app as auth_app
from valstore.commands.store_cmd import app as store_app
from valstore.commands.catalog_cmd import app as catalog_app

app = typer.Typer(
    name="valstore",
    help="Show the VALORANT daily storefront for a Riot account.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth_app, name="auth")
app.add_typer(store_app, name="store")
app.add_typer(catalog_app, name="catalog")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """valstore: authenticate, fetch offers, refresh the catalog."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
