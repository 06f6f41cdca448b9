"""
CLI Client Module.

Command-line client built with Typer for the TensorDock API.

Architecture:
- CLI is a thin presentation layer
- Request/response handling lives in tensordock_cli.api
- One API client per invocation, created from the resolved configuration
"""
