"""
Server Commands.

List, inspect, deploy, modify and control servers, and open a server's
dashboard or an SSH session.
"""

import shlex
import subprocess
import webbrowser
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tensordock_cli.api.schemas import DeploySpec, ModifySpec, ServerRecord
from tensordock_cli.cli.context import fail, get_cli_context, handle_errors

app = typer.Typer(help="Manage servers", no_args_is_help=True)
console = Console()


@app.command("list")
def list_servers(ctx: typer.Context) -> None:
    """
    List servers.

    Examples:
        tensordock-cli servers list
    """
    client = get_cli_context(ctx).client

    with handle_errors():
        result = client.list_servers().raise_for_error()

    table = Table(show_header=True)
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Location")
    table.add_column("Status")

    for server in result.servers.values():
        table.add_row(*(escape(v) for v in (server.id, server.name, server.location, server.status)))

    console.print(table)


@app.command()
def info(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """
    Get server info.

    Examples:
        tensordock-cli servers info 1a2b3c
    """
    client = get_cli_context(ctx).client

    with handle_errors():
        result = client.get_server(server_id).raise_for_error()

    _display_server(result.server)


def _display_server(server: ServerRecord) -> None:
    """Display every property of a server as a two-column table."""
    props = [
        ("ID", server.id),
        ("Name", server.name),
        ("Location", server.location),
        ("IP", server.ip),
        ("Charged Cost", f"{server.cost.charged:g}"),
        ("Hour-On Cost", f"{server.cost.hour_on:g}"),
        ("Hour-Off Cost", f"{server.cost.hour_off:g}"),
        ("Minutes-On", f"{server.cost.minutes_on:g}"),
        ("Minutes-Off", f"{server.cost.minutes_off:g}"),
        ("CPU Model", server.cpu_model),
        ("GPU Count", str(server.gpu_count)),
        ("GPU Model", server.gpu_model),
        ("RAM", f"{server.ram}GB"),
        ("Status", server.status),
        ("Storage", f"{server.storage}GB"),
        ("Storage Class", server.storage_class),
        ("Type", server.type),
        ("vCPUs", str(server.vcpus)),
    ]

    table = Table(show_header=True)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    for name, value in props:
        table.add_row(name, escape(value))

    console.print(table)


@app.command()
def start(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """Start a server."""
    client = get_cli_context(ctx).client
    with handle_errors():
        client.start_server(server_id).raise_for_error()
    console.print("[green]success[/green]")


@app.command()
def stop(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """Stop a server."""
    client = get_cli_context(ctx).client
    with handle_errors():
        client.stop_server(server_id).raise_for_error()
    console.print("[green]success[/green]")


@app.command()
def restart(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """Restart a server."""
    client = get_cli_context(ctx).client
    with handle_errors():
        client.restart_server(server_id).raise_for_error()
    console.print("[green]success[/green]")


@app.command()
def delete(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """Delete a server."""
    client = get_cli_context(ctx).client
    with handle_errors():
        client.delete_server(server_id).raise_for_error()
    console.print("[green]success[/green]")


@app.command()
def deploy(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Server name"),
    admin_user: str = typer.Argument(..., help="Admin username"),
    admin_pass: str = typer.Argument(..., help="Admin password"),
    instance_type: str = typer.Option("gpu", "--instance-type", help='Either "gpu" or "cpu"'),
    gpu_model: str = typer.Option("Quadro_4000", "--gpu-model", help="The GPU model to provision"),
    gpu_count: int = typer.Option(1, "--gpu-count", help="The number of GPUs of the chosen model"),
    cpu_model: str = typer.Option("Intel_Xeon_v4", "--cpu-model", help="The CPU model to provision"),
    vcpus: int = typer.Option(2, "--vcpus", help="Number of vCPUs"),
    ram: int = typer.Option(4, "--ram", help="GB of RAM"),
    storage: int = typer.Option(20, "--storage", help="GB of networked storage"),
    storage_class: str = typer.Option("io1", "--storage-class", help="io1 or st1"),
    os: str = typer.Option("Ubuntu 20.04 LTS", "--os", help="Operating system"),
    location: str = typer.Option("na-us-chi-1", "--location", help="Location"),
) -> None:
    """
    Deploy a server and print its ID.

    Examples:
        tensordock-cli servers deploy my-box admin s3cret
        tensordock-cli servers deploy my-box admin s3cret --instance-type cpu --vcpus 8
    """
    client = get_cli_context(ctx).client

    spec = DeploySpec(
        name=name,
        admin_user=admin_user,
        admin_pass=admin_pass,
        instance_type=instance_type,
        gpu_model=gpu_model,
        gpu_count=gpu_count,
        cpu_model=cpu_model,
        vcpus=vcpus,
        ram=ram,
        storage=storage,
        storage_class=storage_class,
        os=os,
        location=location,
    )

    with handle_errors():
        result = client.deploy_server(spec).raise_for_error()

    console.print(escape(result.server.id))


@app.command()
def modify(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
    instance_type: Optional[str] = typer.Option(None, "--instance-type", help='Either "gpu" or "cpu"'),
    gpu_model: Optional[str] = typer.Option(None, "--gpu-model", help="The GPU model to provision"),
    gpu_count: Optional[int] = typer.Option(None, "--gpu-count", help="The number of GPUs of the chosen model"),
    cpu_model: Optional[str] = typer.Option(None, "--cpu-model", help="The CPU model to provision"),
    vcpus: Optional[int] = typer.Option(None, "--vcpus", help="Number of vCPUs"),
    ram: Optional[int] = typer.Option(None, "--ram", help="GB of RAM"),
    storage: Optional[int] = typer.Option(None, "--storage", help="GB of networked storage"),
    only_changed: bool = typer.Option(
        False,
        "--only-changed",
        help="Send only the given fields instead of restating the current configuration",
    ),
) -> None:
    """
    Modify a server.

    The API expects the whole hardware configuration on every modify call,
    so by default the current configuration is fetched and every option
    not given here is restated from it.

    Examples:
        tensordock-cli servers modify 1a2b3c --ram 16
        tensordock-cli servers modify 1a2b3c --instance-type gpu --gpu-count 2
    """
    client = get_cli_context(ctx).client

    changes = {
        "instance_type": instance_type,
        "gpu_model": gpu_model,
        "gpu_count": gpu_count,
        "cpu_model": cpu_model,
        "vcpus": vcpus,
        "ram": ram,
        "storage": storage,
    }

    with handle_errors():
        if only_changed:
            spec = ModifySpec().merged(**changes)
        else:
            current = client.get_server(server_id).raise_for_error()
            spec = ModifySpec.from_record(current.server).merged(**changes)

        client.modify_server(server_id, spec).raise_for_error()

    console.print("[green]success[/green]")


@app.command()
def status(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """Get server deployment status."""
    client = get_cli_context(ctx).client

    with handle_errors():
        result = client.get_server_status(server_id).raise_for_error()

    console.print(escape(result.status))


@app.command()
def manage(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
) -> None:
    """Open the server management panel in a browser."""
    client = get_cli_context(ctx).client

    with handle_errors():
        result = client.get_server(server_id).raise_for_error()

    url = result.server.link("dashboard")
    if url is None:
        fail(f"Server {server_id} has no dashboard link")

    if not webbrowser.open(url):
        fail(f"Could not open a browser; dashboard is at {url}")


@app.command()
def ssh(
    ctx: typer.Context,
    server_id: str = typer.Argument(..., help="Server ID"),
    ssh_bin: str = typer.Option("ssh", "--bin", help="Name of SSH client executable (e.g. ssh, mosh)"),
    user: str = typer.Option("user", "--user", help="User account to use for login"),
    extra_flags: str = typer.Option("", "--extra-flags", help="Extra flags to pass to the SSH client"),
) -> None:
    """
    Launch an SSH session with a server.

    Examples:
        tensordock-cli servers ssh 1a2b3c
        tensordock-cli servers ssh 1a2b3c --bin mosh --user admin
    """
    client = get_cli_context(ctx).client

    with handle_errors():
        result = client.get_server(server_id).raise_for_error()

    cmd = [ssh_bin, f"{user}@{result.server.ip}", *shlex.split(extra_flags)]

    try:
        completed = subprocess.run(cmd)
    except FileNotFoundError:
        fail(f"SSH client not found: {ssh_bin}")

    if completed.returncode != 0:
        raise typer.Exit(completed.returncode)
