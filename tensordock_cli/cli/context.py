"""
CLI Context.

Holds the resolved configuration and the single API client for one CLI
invocation. The root callback stores it on the Typer context; commands
read it from ctx.obj.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from tensordock_cli.api.client import TensorDockClient
from tensordock_cli.core.config_schema import ClientConfig
from tensordock_cli.core.exceptions import TensorDockError

err_console = Console(stderr=True)


def build_client(config: ClientConfig) -> TensorDockClient:
    """Create the API client for a resolved configuration."""
    return TensorDockClient.from_config(config)


@dataclass
class CliContext:
    """Per-invocation state: configuration and a lazily created client."""

    config: ClientConfig
    config_path: Path
    _client: TensorDockClient | None = field(default=None, repr=False)

    @property
    def client(self) -> TensorDockClient:
        if self._client is None:
            self._client = build_client(self.config)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def get_cli_context(ctx: typer.Context) -> CliContext:
    """Return the CliContext set up by the root callback."""
    if not isinstance(ctx.obj, CliContext):
        raise RuntimeError("CLI context not initialized")
    return ctx.obj


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report client errors as 'Error: ...' and exit 1."""
    try:
        yield
    except TensorDockError as e:
        fail(e.message)
