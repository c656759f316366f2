"""CLI commands for the local item catalog."""

from __future__ import annotations

from typing import Annotated

import httpx
import typer
from rich.console import Console

from valstore.catalog import CatalogStore, fetch_catalog, write_snapshot
from valstore.config import get_config
from valstore.exceptions import ValstoreError
from valstore.utils.errors import handle_error
from valstore.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="catalog", help="Manage the local item catalog.")


@app.command()
def refresh(
    path: Annotated[str | None, typer.Option("--path", "-p", help="Snapshot file to write")] = None,
) -> None:
    """Download skins and bundles from valorant-api.com and write the snapshot."""
    config = get_config()
    target = path or config.settings.catalog_path

    http = httpx.Client(timeout=config.settings.timeout)
    try:
        console.print("Fetching catalog from valorant-api.com...", style="yellow")
        entries = fetch_catalog(http)
        written = write_snapshot(target, entries)
        console.print(f"[green]Wrote {len(entries)} entries to {written}[/green]")
    except (RuntimeError, httpx.HTTPError, OSError) as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        http.close()


@app.command()
def show(
    item_id: Annotated[str, typer.Argument(help="Skin level or bundle uuid")],
    path: Annotated[str | None, typer.Option("--path", "-p", help="Snapshot file to read")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show one catalog entry."""
    config = get_config()
    store = CatalogStore(path or config.settings.catalog_path)

    try:
        entry = store.snapshot().lookup(item_id)
    except ValstoreError as e:
        handle_error(e)
        raise typer.Exit(1)

    print_output({"id": item_id, **entry.model_dump()}, output, title="Catalog Entry")
