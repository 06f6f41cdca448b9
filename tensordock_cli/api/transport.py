"""
HTTP Transport.

Issues exactly one HTTP request per call and hands back the raw body,
status code and content type. Nothing here interprets the body; that is
the normalizer's job.

When debug is enabled, the fully rendered request and response (headers
and body) are mirrored to a diagnostic stream (stderr by default). The
mirror never alters the bytes returned to the caller.
"""

import sys
from dataclasses import dataclass
from typing import Any, TextIO

import httpx

from tensordock_cli import __version__
from tensordock_cli.core.exceptions import TransportError
from tensordock_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

USER_AGENT = f"tensordock-cli/{__version__}"


@dataclass(frozen=True)
class RawResponse:
    """Undecoded HTTP response."""

    content: bytes
    status_code: int
    content_type: str


def render_request(request: httpx.Request) -> str:
    """Render a request as it goes on the wire (request line, headers, body)."""
    lines = [f"{request.method} {request.url.raw_path.decode('ascii')} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    lines.append("")
    lines.append(request.content.decode("utf-8", errors="replace"))
    return "\n".join(lines)


def render_response(response: httpx.Response) -> str:
    """Render a response (status line, headers, body)."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    lines.append("")
    lines.append(response.content.decode("utf-8", errors="replace"))
    return "\n".join(lines)


class Transport:
    """
    Single-attempt HTTP transport for the TensorDock API.

    Features:
    - Paths are resolved relative to the configured base URL
    - User-Agent header on every request
    - Structured logging of requests/responses
    - Optional raw request/response dumps for diagnostics

    Usage:
        transport = Transport("https://console.tensordock.com/api")
        raw = transport.send("GET", "list", params={"api_key": "...", "api_token": "..."})
        transport.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        debug: bool = False,
        dump_stream: TextIO | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            base_url: API base URL; endpoint paths are appended to it.
            timeout: Request timeout in seconds.
            debug: Mirror raw requests/responses to dump_stream.
            dump_stream: Diagnostic stream. Defaults to stderr.
            http_transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self._dump_stream = dump_stream
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            transport=http_transport,
        )

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _dump(self, text: str) -> None:
        stream = self._dump_stream or sys.stderr
        stream.write(text)
        stream.write("\n\n")
        stream.flush()

    def send(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> RawResponse:
        """
        Send one HTTP request.

        Args:
            method: HTTP method (GET, POST)
            path: Path relative to the base URL (e.g. "get/single")
            params: Query-string parameters
            headers: Extra request headers
            body: Raw request body

        Returns:
            RawResponse with the untouched body bytes

        Raises:
            TransportError: On malformed request, connection failure or timeout
        """
        try:
            request = self._client.build_request(
                method,
                path.lstrip("/"),
                params=params,
                headers=headers,
                content=body,
            )
        except (httpx.InvalidURL, httpx.HTTPError) as e:
            raise TransportError(f"Could not build request {method} {path}: {e}") from e

        if self.debug:
            self._dump(render_request(request))

        log_with_source(
            logger,
            "api",
            "debug",
            "API request",
            method=method,
            path=path,
            params=params,
        )

        try:
            response = self._client.send(request)
        except (httpx.InvalidURL, httpx.HTTPError) as e:
            log_with_source(
                logger,
                "api",
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise TransportError(f"{method} {path} failed: {e}") from e

        if self.debug:
            self._dump(render_response(response))

        content_type = response.headers.get("content-type", "")

        log_with_source(
            logger,
            "api",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
            content_type=content_type,
        )

        return RawResponse(
            content=response.content,
            status_code=response.status_code,
            content_type=content_type,
        )
