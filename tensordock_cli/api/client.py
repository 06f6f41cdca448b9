"""
TensorDock API Client.

One method per API action. Each call follows the same path:

    build params -> (marshal body) -> Transport.send -> normalize -> decode

Reads are GET requests with query parameters; writes are POST requests
with form-encoded bodies. Authenticated calls carry api_key and api_token
(query on GET, form on POST); the two stock listings are public.

Results always carry `success`; use result.raise_for_error() to turn a
failed envelope into an ApiError. Nothing is retried.
"""

from dataclasses import dataclass
from typing import Any, TextIO

import httpx

from tensordock_cli.api.marshaller import marshal_deploy, marshal_modify
from tensordock_cli.api.normalizer import normalize_response
from tensordock_cli.api.schemas import (
    BillingResult,
    CpuStockResult,
    DeployServerResult,
    DeploySpec,
    GetServerResult,
    GpuStockResult,
    ListServersResult,
    ModifySpec,
    Response,
    ResultT,
    ServerStatusResult,
    decode,
)
from tensordock_cli.api.transport import Transport
from tensordock_cli.core.config_schema import ClientConfig
from tensordock_cli.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class Credentials:
    """API key and token. Loaded once, never modified."""

    api_key: str
    api_token: str

    def as_params(self) -> dict[str, str]:
        return {"api_key": self.api_key, "api_token": self.api_token}

    def __repr__(self) -> str:
        return "Credentials(api_key='***', api_token='***')"


class TensorDockClient:
    """
    Typed client for the TensorDock server API.

    Usage:
        with TensorDockClient.from_config(config) as client:
            result = client.list_servers().raise_for_error()
            for server in result.servers.values():
                print(server.name, server.status)
    """

    def __init__(
        self,
        base_url: str,
        credentials: Credentials,
        debug: bool = False,
        timeout: float = 30.0,
        dump_stream: TextIO | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.credentials = credentials
        self.transport = Transport(
            base_url,
            timeout=timeout,
            debug=debug,
            dump_stream=dump_stream,
            http_transport=http_transport,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "TensorDockClient":
        """Build a client from a resolved ClientConfig."""
        return cls(
            config.service_url,
            Credentials(api_key=config.api_key, api_token=config.api_token),
            debug=config.debug,
            timeout=config.timeout,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self.transport.base_url

    def __enter__(self) -> "TensorDockClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying transport."""
        self.transport.close()

    # -------------------------------------------------------------------------
    # Request plumbing
    # -------------------------------------------------------------------------

    def _get(
        self,
        model: type[ResultT],
        path: str,
        params: dict[str, str] | None = None,
        auth: bool = True,
    ) -> ResultT:
        query: dict[str, str] = {}
        if auth:
            query.update(self.credentials.as_params())
        query.update(params or {})

        raw = self.transport.send("GET", path, params=query or None)
        return self._decode(model, path, normalize_response(raw))

    def _post(
        self,
        model: type[ResultT],
        path: str,
        form: dict[str, str] | None = None,
        auth: bool = True,
    ) -> ResultT:
        fields: dict[str, str] = {}
        if auth:
            fields.update(self.credentials.as_params())
        fields.update(form or {})

        raw = self.transport.send(
            "POST",
            path,
            headers={"Content-Type": FORM_CONTENT_TYPE},
            body=str(httpx.QueryParams(fields)).encode("ascii"),
        )
        return self._decode(model, path, normalize_response(raw))

    def _decode(self, model: type[ResultT], path: str, envelope: bytes) -> ResultT:
        result = decode(model, envelope)
        log_with_source(
            logger,
            "api",
            "debug",
            "API result",
            path=path,
            result=model.__name__,
            success=result.success,
            error=result.error or None,
        )
        return result

    # -------------------------------------------------------------------------
    # Servers
    # -------------------------------------------------------------------------

    def list_servers(self) -> ListServersResult:
        """List all servers on the account."""
        return self._get(ListServersResult, "list")

    def get_server(self, server_id: str) -> GetServerResult:
        """Fetch one server's full record."""
        return self._get(GetServerResult, "get/single", {"server": server_id})

    def start_server(self, server_id: str) -> Response:
        return self._get(Response, "start/single", {"server": server_id})

    def stop_server(self, server_id: str) -> Response:
        return self._get(Response, "stop/single", {"server": server_id})

    def restart_server(self, server_id: str) -> Response:
        return self._get(Response, "restart/single", {"server": server_id})

    def delete_server(self, server_id: str) -> Response:
        return self._get(Response, "delete/single", {"server": server_id})

    def deploy_server(self, spec: DeploySpec) -> DeployServerResult:
        """
        Deploy a new server.

        Raises:
            ValidationError: Before any request, if the spec's instance type
                is unknown or a required hardware field is missing
        """
        body = marshal_deploy(spec)
        return self._post(DeployServerResult, "deploy/single/custom", body)

    def modify_server(self, server_id: str, spec: ModifySpec) -> Response:
        """
        Modify an existing server.

        Only the fields present in `spec` are sent. The API has been observed
        to require the full configuration anyway; see ModifySpec.from_record.

        Raises:
            ValidationError: Before any request, on an unknown instance type
        """
        body = {"server_id": server_id, **marshal_modify(spec)}
        return self._post(Response, "modify/single/custom", body)

    def get_server_status(self, server_id: str) -> ServerStatusResult:
        """Fetch the deployment status of a server."""
        return self._post(ServerStatusResult, "deploy/status", {"server": server_id})

    # -------------------------------------------------------------------------
    # Billing
    # -------------------------------------------------------------------------

    def get_billing_details(self) -> BillingResult:
        return self._get(BillingResult, "billing")

    # -------------------------------------------------------------------------
    # Stock (public)
    # -------------------------------------------------------------------------

    def list_gpu_stock(self) -> GpuStockResult:
        return self._get(GpuStockResult, "stock/list", auth=False)

    def list_cpu_stock(self) -> CpuStockResult:
        return self._get(CpuStockResult, "stock/cpu/list", auth=False)
