"""
Billing Commands.
"""

import typer
from rich.console import Console

from tensordock_cli.cli.context import get_cli_context, handle_errors

console = Console()


def billing(ctx: typer.Context) -> None:
    """
    Show account balance and hourly spending rate.

    Examples:
        tensordock-cli billing
    """
    client = get_cli_context(ctx).client

    with handle_errors():
        result = client.get_billing_details().raise_for_error()

    console.print(f"Balance: {result.balance:g}")
    console.print(f"Hourly Spending Rate: {result.hourly_spending_rate:g}")
