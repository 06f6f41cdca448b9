"""
Request Marshalling.

Turns typed request specs into flat string form bodies.

Deploy bodies carry every field; the instance type decides which hardware
fields are sent (gpu_model/gpu_count for "gpu", cpu_model for "cpu").
Modify bodies carry only the fields that were explicitly given. An empty
value and a missing key mean different things to the API, so absent fields
are never sent as "" or null.

Credentials are not added here; the endpoint layer injects them.
"""

from typing import Any

from tensordock_cli.api.schemas import (
    CPU_ONLY_FIELDS,
    GPU_ONLY_FIELDS,
    INSTANCE_TYPES,
    DeploySpec,
    ModifySpec,
)
from tensordock_cli.core.exceptions import ValidationError


def render_value(value: Any) -> str:
    """Render a field value in its wire form (integers in base 10, booleans lowercase)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def excluded_fields(instance_type: str) -> frozenset[str]:
    """
    Hardware fields that must not be sent for an instance type.

    Raises:
        ValidationError: If the instance type is not "gpu" or "cpu"
    """
    if instance_type == "cpu":
        return GPU_ONLY_FIELDS
    if instance_type == "gpu":
        return CPU_ONLY_FIELDS
    raise ValidationError(
        "unknown instance type",
        details={"instance_type": instance_type, "allowed": list(INSTANCE_TYPES)},
    )


def marshal_deploy(spec: DeploySpec) -> dict[str, str]:
    """
    Marshal a full deploy spec.

    Raises:
        ValidationError: On an unknown instance type, or when a hardware
            field required by the instance type is missing
    """
    excluded = excluded_fields(spec.instance_type)

    body: dict[str, str] = {}
    for name, value in spec.model_dump().items():
        if name in excluded:
            continue
        if value is None:
            raise ValidationError(
                f"{name} is required for {spec.instance_type} instances",
                details={"field": name},
            )
        body[name] = render_value(value)
    return body


def marshal_modify(spec: ModifySpec) -> dict[str, str]:
    """
    Marshal a partial modify spec, omitting absent fields.

    If instance_type is present it is validated and the other type's
    hardware fields are dropped.

    Raises:
        ValidationError: On an unknown instance type
    """
    present = spec.present_fields()

    excluded: frozenset[str] = frozenset()
    if "instance_type" in present:
        excluded = excluded_fields(present["instance_type"])

    return {
        name: render_value(value)
        for name, value in present.items()
        if name not in excluded
    }
