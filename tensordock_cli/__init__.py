"""
TensorDock CLI.

Command-line client for the TensorDock server rental API.

- api/: Transport, response normalization, request marshalling, endpoint operations
- cli/: Typer commands and Rich rendering
- core/: Configuration, logging, exceptions
"""

__version__ = "0.7.1"
