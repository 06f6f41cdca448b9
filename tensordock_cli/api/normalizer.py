"""
Response Normalization.

The API reports success in several ways: a JSON boolean, a string boolean,
or not at all (implied by the status code). Some failure paths return an
HTML error page with a 200 status. Every response passes through
normalize() so that typed decoding can rely on a single boolean
`success` field.

Rules, in order:
    1. text/html content type -> {"success": false, "error": "api call failed"}
    2. body must parse as a JSON object, otherwise NormalizationError
    3. string `success` -> parsed boolean; unparseable -> false
    4. missing `success` -> true when 200 <= status <= 300, else left absent
    5. re-serialize
"""

import json
from typing import Any

from tensordock_cli.api.transport import RawResponse
from tensordock_cli.core.exceptions import NormalizationError
from tensordock_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

HTML_FAILURE_MESSAGE = "api call failed"

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> bool:
    """
    Parse a string boolean, case-sensitively.

    Accepts 1/t/T/TRUE/true/True and 0/f/F/FALSE/false/False.

    Raises:
        ValueError: For any other spelling
    """
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ValueError(f"invalid boolean string: {value!r}")


def is_html(content_type: str) -> bool:
    return content_type.strip().lower().startswith("text/html")


def normalize_document(
    content: bytes,
    status_code: int,
    content_type: str,
) -> dict[str, Any]:
    """
    Apply the normalization rules and return the envelope as a dict.

    Raises:
        NormalizationError: If the body is not a JSON object and not HTML
    """
    if is_html(content_type):
        log_with_source(
            logger,
            "api",
            "warning",
            "HTML response replaced with failure envelope",
            status_code=status_code,
        )
        return {"success": False, "error": HTML_FAILURE_MESSAGE}

    try:
        document = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise NormalizationError(f"Response body is not valid JSON: {e}", body=content) from e

    if not isinstance(document, dict):
        raise NormalizationError(
            f"Response body is not a JSON object (got {type(document).__name__})",
            body=content,
        )

    if "success" in document:
        value = document["success"]
        if isinstance(value, str):
            try:
                document["success"] = parse_bool(value)
            except ValueError:
                log_with_source(
                    logger,
                    "api",
                    "warning",
                    "Unparseable success string treated as false",
                    value=value,
                )
                document["success"] = False
    elif 200 <= status_code <= 300:
        document["success"] = True

    return document


def normalize(
    content: bytes,
    status_code: int,
    content_type: str,
) -> bytes:
    """
    Normalize a raw response body into canonical envelope bytes.

    Args:
        content: Raw response body
        status_code: HTTP status code
        content_type: Value of the Content-Type header ("" if absent)

    Returns:
        UTF-8 JSON bytes of the envelope

    Raises:
        NormalizationError: If the body is not a JSON object and not HTML
    """
    document = normalize_document(content, status_code, content_type)
    return json.dumps(document).encode("utf-8")


def normalize_response(raw: RawResponse) -> bytes:
    """normalize() for a RawResponse."""
    return normalize(raw.content, raw.status_code, raw.content_type)
