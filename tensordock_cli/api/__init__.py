"""
TensorDock API layer.

Transport -> normalizer -> typed decode, plus request marshalling.
"""

from tensordock_cli.api.client import Credentials, TensorDockClient
from tensordock_cli.api.schemas import DeploySpec, ModifySpec

__all__ = [
    "Credentials",
    "DeploySpec",
    "ModifySpec",
    "TensorDockClient",
]
