"""CLI commands for authentication."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from valstore.config import get_config
from valstore.auth import PasswordAuthProvider
from valstore.exceptions import ValstoreError
from valstore.utils.errors import handle_error
from valstore.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Authenticate against Riot.")


@app.command()
def login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Run the login handshake and display the resulting bundle status.

    Tokens are never printed.
    """
    config = get_config()

    try:
        auth = PasswordAuthProvider.from_config(config)
    except ValstoreError as e:
        handle_error(e)
        raise typer.Exit(1)

    try:
        console.print(f"Authenticating [bold]{config.settings.username}[/bold]...", style="yellow")
        auth.get_bundle()
        status = auth.get_status()
        result = {
            "status": "authenticated",
            "subject_id": status.subject_id,
            "expires_at": status.expires_at,
            "seconds_remaining": status.seconds_remaining,
        }
        print_output(result, output, title="Authentication")
    except ValstoreError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        auth.close()
