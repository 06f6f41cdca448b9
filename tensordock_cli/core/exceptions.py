"""
Custom Exceptions.

Client-specific exception classes for consistent error handling.
Every exception carries a human-readable message and a stable code so the
CLI layer can report failures without inspecting HTTP details.
"""


class TensorDockError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class TransportError(TensorDockError):
    """Raised when a request cannot be built or delivered (connection, timeout, bad URL)."""

    def __init__(self, message: str = "Transport error") -> None:
        super().__init__(message, code="NET_TRANSPORT_ERROR")


class NormalizationError(TensorDockError):
    """Raised when a response body is neither HTML nor a JSON object."""

    def __init__(self, message: str = "Unparseable response body", body: bytes = b"") -> None:
        self.body = body
        super().__init__(message, code="RESP_NORMALIZATION_ERROR")


class ValidationError(TensorDockError):
    """Raised when a request fails local validation, before any network call."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ApiError(TensorDockError):
    """Raised when the normalized envelope reports success=false."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "endpoint returned error", code="API_ERROR")


class DecodeError(TensorDockError):
    """Raised when a normalized envelope does not match the expected result shape."""

    def __init__(self, message: str = "Response did not match expected schema", details: list | None = None) -> None:
        self.details = details or []
        super().__init__(message, code="RESP_DECODE_ERROR")


class ConfigurationError(TensorDockError):
    """Raised when the configuration file cannot be read or is invalid."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID_CONFIG")
