"""
Stock Commands.

Query hardware availability per model and region. Stock listings are
public and do not use credentials.
"""

import typer
from rich.console import Console
from rich.table import Table

from tensordock_cli.api.schemas import CpuStockResult, GpuStockResult
from tensordock_cli.cli.context import fail, get_cli_context, handle_errors

app = typer.Typer(help="Query stock", no_args_is_help=True)
console = Console()


@app.command("list")
def list_stock(
    ctx: typer.Context,
    instance_type: str = typer.Option("gpu", "--type", help="Instance type (gpu or cpu)"),
    show_all: bool = typer.Option(False, "--all", help="Include out-of-stock instances"),
) -> None:
    """
    List stock.

    Examples:
        tensordock-cli stock list
        tensordock-cli stock list --type cpu --all
    """
    client = get_cli_context(ctx).client

    if instance_type == "gpu":
        with handle_errors():
            gpu_result = client.list_gpu_stock().raise_for_error()
        console.print(_gpu_table(gpu_result, show_all))
    elif instance_type == "cpu":
        with handle_errors():
            cpu_result = client.list_cpu_stock().raise_for_error()
        console.print(_cpu_table(cpu_result, show_all))
    else:
        fail("unknown instance type")


def _gpu_table(result: GpuStockResult, show_all: bool) -> Table:
    table = Table(show_header=True)
    table.add_column("GPU", style="cyan")
    table.add_column("Region")
    table.add_column("Available Now", justify="right")
    table.add_column("Available Reserve", justify="right")

    for gpu_model, regions in result.stock.items():
        for region, entry in regions.items():
            if entry.in_stock or show_all:
                table.add_row(
                    gpu_model,
                    region,
                    str(entry.available_now),
                    str(entry.available_reserve),
                )
    return table


def _cpu_table(result: CpuStockResult, show_all: bool) -> Table:
    table = Table(show_header=True)
    table.add_column("CPU Model", style="cyan")
    table.add_column("Region")
    table.add_column("Available Now", justify="right")

    for cpu_model, regions in result.stock.items():
        for region, entry in regions.items():
            if entry.in_stock or show_all:
                table.add_row(cpu_model, region, entry.available_now)
    return table
