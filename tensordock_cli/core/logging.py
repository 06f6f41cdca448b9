"""
Centralized Logging Configuration.

All modules must use this logging setup. Do not create standalone loggers.
Logs go to stderr so that stdout only carries command output (tables, ids).

Structured fields in every log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - Log level (debug, info, warning, error, critical)
    logger      - Module path (e.g., tensordock_cli.api.transport)
    event       - Log message
    source      - Origin context, set explicitly (cli, api, config)

Usage:
    from tensordock_cli.core.logging import get_logger, setup_logging

    # Setup once at CLI start
    setup_logging(level="DEBUG", format_type="console")

    # Get logger in modules
    logger = get_logger(__name__)
    logger.info("Message", server_id="abc")

    # Explicit source
    log_with_source(logger, "api", "debug", "API request", method="GET")
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

VALID_SOURCES = frozenset({
    "cli",
    "api",
    "config",
})
"""
Recognized log source values.
Source is always set explicitly by the caller.
"""

SECRET_FIELDS = frozenset({"api_key", "api_token", "admin_pass"})

REDACTED = "***REDACTED***"


def _redact_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SECRET_FIELDS else _redact_value(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact_value(v) for v in value]
    return value


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Structlog processor that masks credential fields.

    Top-level keys and nested dict keys named like a secret are replaced,
    so params and form bodies can be logged as-is.
    """
    for key in list(event_dict):
        if key.lower() in SECRET_FIELDS:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _redact_value(event_dict[key])
    return event_dict


def setup_logging(
    level: str = "WARNING",
    format_type: str = "console",
) -> None:
    """
    Configure structured logging for the CLI.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_type: Output format ('json' or 'console').
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if format_type == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Args:
        logger: The logger instance
        source: Log source (cli, api, config)
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **kwargs: Additional context fields

    Raises:
        AttributeError: If level is not a valid log level

    Example:
        log_with_source(logger, "api", "debug", "API response", status_code=200)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
