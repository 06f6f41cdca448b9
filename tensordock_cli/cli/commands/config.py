"""
Config Commands.

Write credentials and the service URL to the config file.
"""

from typing import Optional

import typer
from rich.console import Console

from tensordock_cli.cli.context import get_cli_context, handle_errors
from tensordock_cli.core.config import save_config

console = Console()


def config(
    ctx: typer.Context,
    api_key: str = typer.Option(..., "--api-key", help="API key"),
    api_token: str = typer.Option(..., "--api-token", help="API token"),
    service_url: Optional[str] = typer.Option(None, "--service-url", help="Service URL"),
) -> None:
    """
    Set API key/token.

    Examples:
        tensordock-cli config --api-key KEY --api-token TOKEN
    """
    cli_ctx = get_cli_context(ctx)

    with handle_errors():
        path = save_config(
            cli_ctx.config_path,
            api_key=api_key,
            api_token=api_token,
            service_url=service_url,
        )

    console.print(f"[green]config updated[/green] [dim]({path})[/dim]")
