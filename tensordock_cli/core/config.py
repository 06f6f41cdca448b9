"""
Configuration Management.

Settings are resolved from three sources, highest precedence first:

    1. Command-line flags (--api-key, --api-token, --service-url, --debug)
    2. Environment variables (TENSORDOCK_API_KEY, TENSORDOCK_API_TOKEN,
       TENSORDOCK_SERVICE_URL, TENSORDOCK_DEBUG)
    3. YAML config file (~/.tensordock.yml, or --config PATH)

Values missing from all three fall back to ClientConfig defaults.
The result is a frozen ClientConfig, loaded once per CLI invocation.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from tensordock_cli.core.config_schema import ClientConfig, ConfigFileSchema
from tensordock_cli.core.exceptions import ConfigurationError
from tensordock_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

CONFIG_FILENAME = ".tensordock.yml"


def default_config_path() -> Path:
    """Return ~/.tensordock.yml."""
    return Path.home() / CONFIG_FILENAME


class Settings(BaseSettings):
    """Values read from TENSORDOCK_* environment variables."""

    service_url: str | None = None
    api_key: str | None = None
    api_token: str | None = None
    debug: bool | None = None

    model_config = SettingsConfigDict(
        env_prefix="TENSORDOCK_",
        case_sensitive=False,
        extra="ignore",
    )


def load_yaml_config(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping")
    return data


def load_config_file(path: Path) -> ConfigFileSchema:
    """Load and validate the config file. A missing file yields an empty schema."""
    try:
        raw = load_yaml_config(path)
    except FileNotFoundError:
        log_with_source(logger, "config", "debug", "Config file not found", path=str(path))
        return ConfigFileSchema()

    try:
        return ConfigFileSchema(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{e}") from e


def load_config(
    config_path: Path | None = None,
    **overrides: Any,
) -> ClientConfig:
    """
    Resolve the client configuration.

    Args:
        config_path: YAML file to read. Defaults to ~/.tensordock.yml.
        **overrides: Flag values. None means "not given on the command line".

    Returns:
        Frozen ClientConfig.
    """
    path = config_path or default_config_path()
    file_values = load_config_file(path).model_dump(exclude_none=True)
    env_values = Settings().model_dump(exclude_none=True)
    flag_values = {k: v for k, v in overrides.items() if v is not None}

    merged = {**file_values, **env_values, **flag_values}
    log_with_source(
        logger,
        "config",
        "debug",
        "Configuration resolved",
        path=str(path),
        service_url=merged.get("service_url"),
        sources=sorted(merged),
    )
    return ClientConfig(**merged)


def save_config(
    config_path: Path | None = None,
    **values: Any,
) -> Path:
    """
    Write values into the YAML config file, keeping keys already present.

    Keys are stored camelCase. None values are skipped.

    Returns:
        The path written.
    """
    path = config_path or default_config_path()
    existing = load_config_file(path) if path.exists() else ConfigFileSchema()
    updated = existing.model_copy(update={k: v for k, v in values.items() if v is not None})
    data = updated.model_dump(by_alias=True, exclude_none=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)

    log_with_source(logger, "config", "info", "Config file written", path=str(path))
    return path
