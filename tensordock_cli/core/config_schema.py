"""
Configuration Schemas.

Pydantic models defining the expected structure of the CLI configuration.
A config file with unknown keys or wrong types raises a clear error at
startup instead of a cryptic failure deep in a command.

    ConfigFileSchema  → ~/.tensordock.yml
    ClientConfig      → resolved configuration handed to the API client
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_SERVICE_URL = "https://console.tensordock.com/api"


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# =============================================================================
# ~/.tensordock.yml
# =============================================================================


class ConfigFileSchema(_StrictBase):
    """
    On-disk configuration.

    Keys are written camelCase (serviceUrl, apiKey, apiToken). Older files
    store them lowercased (serviceurl, apikey, apitoken); those and
    snake_case are accepted too.
    """

    service_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("serviceUrl", "serviceurl", "service_url"),
        serialization_alias="serviceUrl",
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("apiKey", "apikey", "api_key"),
        serialization_alias="apiKey",
    )
    api_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("apiToken", "apitoken", "api_token"),
        serialization_alias="apiToken",
    )
    debug: bool | None = None


# =============================================================================
# Resolved configuration
# =============================================================================


class ClientConfig(BaseModel):
    """Configuration resolved from flags, environment and file. Immutable."""

    model_config = ConfigDict(frozen=True)

    service_url: str = DEFAULT_SERVICE_URL
    api_key: str = ""
    api_token: str = ""
    debug: bool = False
    timeout: float = 30.0
