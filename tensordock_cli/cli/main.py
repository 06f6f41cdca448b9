"""
TensorDock CLI.

Command-line client for the TensorDock API.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    tensordock-cli --help                                  # Show help
    tensordock-cli config --api-key KEY --api-token TOKEN  # Save credentials

    # Servers
    tensordock-cli servers list
    tensordock-cli servers info SERVER_ID
    tensordock-cli servers deploy NAME ADMIN_USER ADMIN_PASS --instance-type cpu
    tensordock-cli servers modify SERVER_ID --ram 16
    tensordock-cli servers start|stop|restart|delete SERVER_ID
    tensordock-cli servers status SERVER_ID
    tensordock-cli servers manage SERVER_ID                # Open dashboard
    tensordock-cli servers ssh SERVER_ID

    # Account and stock
    tensordock-cli billing
    tensordock-cli stock list --type gpu --all

Options:
    --config PATH     Config file (default ~/.tensordock.yml)
    --api-key KEY     API key (overrides env and config file)
    --api-token TOK   API token (overrides env and config file)
    --service-url URL API base URL
    --verbose, -v     Enable verbose output (INFO level logging)
    --debug, -d       Enable debug mode (DEBUG logging and raw HTTP dumps)
"""

from pathlib import Path
from typing import Optional

import typer

from tensordock_cli import __version__
from tensordock_cli.cli.commands import billing, config, servers_app, stock_app
from tensordock_cli.cli.context import CliContext, err_console, handle_errors
from tensordock_cli.core.config import default_config_path, load_config
from tensordock_cli.core.logging import setup_logging

app = typer.Typer(
    name="tensordock-cli",
    help="TensorDock CLI - manage servers, billing and stock.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(servers_app, name="servers")
app.add_typer(stock_app, name="stock")
app.command("billing")(billing)
app.command("config")(config)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tensordock-cli {__version__}")
        raise typer.Exit()


def _log_level(debug: bool, verbose: bool) -> str:
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return "WARNING"


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Config file (default is $HOME/.tensordock.yml)",
    ),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key"),
    api_token: Optional[str] = typer.Option(None, "--api-token", help="API token"),
    service_url: Optional[str] = typer.Option(None, "--service-url", help="Service URL"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging and raw HTTP dumps)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    TensorDock CLI.

    Manage servers, check billing and query hardware stock.
    Credentials come from --api-key/--api-token, TENSORDOCK_* environment
    variables, or the config file.
    """
    setup_logging(level=_log_level(debug, verbose), format_type="console")

    path = config_path or default_config_path()
    with handle_errors():
        resolved = load_config(
            path,
            service_url=service_url,
            api_key=api_key,
            api_token=api_token,
            debug=True if debug else None,
        )

    if resolved.debug:
        if not debug:
            setup_logging(level="DEBUG", format_type="console")
        err_console.print("[dim]Debug mode enabled[/dim]")

    cli_ctx = CliContext(config=resolved, config_path=path)
    ctx.obj = cli_ctx
    ctx.call_on_close(cli_ctx.close)


if __name__ == "__main__":
    app()
