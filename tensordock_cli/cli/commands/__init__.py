"""
CLI Commands.

Organized by API area.
"""

from tensordock_cli.cli.commands.billing import billing
from tensordock_cli.cli.commands.config import config
from tensordock_cli.cli.commands.servers import app as servers_app
from tensordock_cli.cli.commands.stock import app as stock_app

__all__ = [
    "billing",
    "config",
    "servers_app",
    "stock_app",
]
