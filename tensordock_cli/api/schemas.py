"""
API Schemas.

Typed views of the normalized response envelope and the request bodies.

Every result model extends Response, so callers can always branch on
`success` (or call raise_for_error()) without looking at HTTP status codes.
Missing or null payload fields decode to empty values; fields of the
wrong type are a DecodeError.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from tensordock_cli.core.exceptions import ApiError, DecodeError

INSTANCE_TYPES = ("gpu", "cpu")
GPU_ONLY_FIELDS = frozenset({"gpu_model", "gpu_count"})
CPU_ONLY_FIELDS = frozenset({"cpu_model"})


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_is_missing(cls, data: Any) -> Any:
        # null decodes to the field default, the same as an absent key
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# =============================================================================
# Envelope
# =============================================================================


class Response(_Payload):
    """
    Normalized response envelope.

    `success` is strictly boolean; the normalizer has already coerced
    string booleans and filled it in from the status code where needed.
    """

    success: bool = Field(default=False, strict=True)
    error: str = ""

    def raise_for_error(self: "ResultT") -> "ResultT":
        """Return self, or raise ApiError if the call did not succeed."""
        if not self.success:
            raise ApiError(self.error or None)
        return self


ResultT = TypeVar("ResultT", bound=Response)


def decode(model: type[ResultT], envelope: bytes) -> ResultT:
    """
    Decode normalized envelope bytes into a typed result.

    Raises:
        DecodeError: If the envelope does not match the model
    """
    try:
        return model.model_validate_json(envelope)
    except PydanticValidationError as e:
        raise DecodeError(
            f"Unexpected {model.__name__} payload: {e.error_count()} invalid field(s)",
            details=e.errors(include_url=False),
        ) from e


# =============================================================================
# Servers
# =============================================================================


class ServerCost(_Payload):
    """Cost breakdown of a server."""

    charged: float = 0.0
    hour_on: float = 0.0
    hour_off: float = 0.0
    minutes_on: float = 0.0
    minutes_off: float = 0.0


class ServerRecord(_Payload):
    """A virtual server as reported by get/single and list."""

    id: str = ""
    name: str = ""
    location: str = ""
    status: str = ""
    ip: str = ""
    type: str = ""
    cpu_model: str = ""
    gpu_model: str = ""
    gpu_count: int = 0
    vcpus: int = 0
    ram: int = 0
    storage: int = 0
    storage_class: str = ""
    cost: ServerCost = Field(default_factory=ServerCost)
    links: dict[str, dict[str, str]] = Field(default_factory=dict)

    def link(self, name: str) -> str | None:
        """Return the href of a named link (e.g. "dashboard"), if present."""
        return self.links.get(name, {}).get("href") or None


class DeployedServer(_Payload):
    """Server summary returned by deploy/single/custom."""

    id: str = ""
    ip: str = ""
    links: list[dict[str, str]] = Field(default_factory=list)


class ListServersResult(Response):
    servers: dict[str, ServerRecord] = Field(default_factory=dict)


class GetServerResult(Response):
    server: ServerRecord = Field(default_factory=ServerRecord)


class ServerStatusResult(Response):
    status: str = ""


class DeployServerResult(Response):
    server: DeployedServer = Field(default_factory=DeployedServer)


# =============================================================================
# Billing
# =============================================================================


class BillingResult(Response):
    balance: float = 0.0
    hourly_spending_rate: float = 0.0


# =============================================================================
# Stock
# =============================================================================


class GpuStockEntry(_Payload):
    available_now: int = 0
    available_reserve: int = 0

    @property
    def in_stock(self) -> bool:
        return self.available_now > 0 or self.available_reserve > 0


class CpuStockEntry(_Payload):
    """CPU availability: a count rendered as a string, or the sentinel "None"."""

    available_now: str = ""

    @field_validator("available_now", mode="before")
    @classmethod
    def _number_to_string(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def in_stock(self) -> bool:
        return self.available_now != "None"


class GpuStockResult(Response):
    stock: dict[str, dict[str, GpuStockEntry]] = Field(default_factory=dict)


class CpuStockResult(Response):
    stock: dict[str, dict[str, CpuStockEntry]] = Field(default_factory=dict)


# =============================================================================
# Requests
# =============================================================================


class DeploySpec(BaseModel):
    """
    Full deploy request. Every field is required except the hardware
    fields of the instance type not selected by `instance_type`.
    """

    name: str
    admin_user: str
    admin_pass: str
    instance_type: str
    gpu_model: str | None = None
    gpu_count: int | None = None
    cpu_model: str | None = None
    vcpus: int
    ram: int
    storage: int
    storage_class: str
    os: str
    location: str


class ModifySpec(BaseModel):
    """
    Partial modify request.

    A field is present only if it was explicitly given a non-None value;
    absent fields are left out of the request body entirely.
    """

    name: str | None = None
    admin_user: str | None = None
    admin_pass: str | None = None
    instance_type: str | None = None
    gpu_model: str | None = None
    gpu_count: int | None = None
    cpu_model: str | None = None
    vcpus: int | None = None
    ram: int | None = None
    storage: int | None = None
    storage_class: str | None = None
    os: str | None = None
    location: str | None = None

    def present_fields(self) -> dict[str, Any]:
        """Fields that were explicitly set, in declaration order."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: ServerRecord) -> "ModifySpec":
        """
        Restate the hardware configuration of an existing server.

        The modify endpoint expects the whole configuration on every call,
        so callers start from this and overlay the fields they change.
        """
        values: dict[str, Any] = {
            "instance_type": record.type.lower() or None,
            "gpu_model": record.gpu_model or None,
            "gpu_count": record.gpu_count or None,
            "cpu_model": record.cpu_model or None,
            "vcpus": record.vcpus or None,
            "ram": record.ram or None,
            "storage": record.storage or None,
        }
        return cls(**{k: v for k, v in values.items() if v is not None})

    def merged(self, **changes: Any) -> "ModifySpec":
        """Return a copy with the non-None changes applied on top."""
        return type(self)(**{
            **self.present_fields(),
            **{k: v for k, v in changes.items() if v is not None},
        })
