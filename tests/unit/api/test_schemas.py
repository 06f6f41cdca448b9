"""
Unit Tests for API Schemas.

Tests envelope decoding, typed results and the request spec helpers.
"""

import json

import pytest

from tensordock_cli.api.normalizer import normalize
from tensordock_cli.api.schemas import (
    BillingResult,
    CpuStockEntry,
    CpuStockResult,
    DeployServerResult,
    GetServerResult,
    GpuStockEntry,
    ListServersResult,
    ModifySpec,
    Response,
    ServerRecord,
    decode,
)
from tensordock_cli.core.exceptions import ApiError, DecodeError


def _envelope(**fields) -> bytes:
    return json.dumps(fields).encode("utf-8")


class TestResponse:
    """Tests for the base envelope."""

    def test_success_envelope(self) -> None:
        result = decode(Response, _envelope(success=True))
        assert result.success is True
        assert result.error == ""

    def test_missing_success_decodes_false(self) -> None:
        """An error status without a success field is a failure."""
        result = decode(Response, _envelope(error="not found"))
        assert result.success is False
        assert result.error == "not found"

    def test_null_error_is_empty(self) -> None:
        assert decode(Response, _envelope(success=True, error=None)).error == ""

    def test_string_success_rejected(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode(Response, _envelope(success="true"))
        assert exc_info.value.code == "RESP_DECODE_ERROR"
        assert exc_info.value.details[0]["loc"] == ("success",)

    def test_integer_success_rejected(self) -> None:
        with pytest.raises(DecodeError):
            decode(Response, _envelope(success=1))

    def test_null_success_decodes_false(self) -> None:
        result = decode(Response, normalize(b'{"success": null, "error": "boom"}', 200, "application/json"))
        assert result.success is False
        assert result.error == "boom"

    def test_unknown_fields_ignored(self) -> None:
        result = decode(Response, _envelope(success=True, extra={"a": 1}))
        assert result.success is True

    def test_raise_for_error_returns_self(self) -> None:
        result = decode(Response, _envelope(success=True))
        assert result.raise_for_error() is result

    def test_raise_for_error_uses_error_message(self) -> None:
        result = decode(Response, _envelope(success=False, error="Server not found"))
        with pytest.raises(ApiError, match="Server not found"):
            result.raise_for_error()

    def test_raise_for_error_default_message(self) -> None:
        result = decode(Response, _envelope(success=False))
        with pytest.raises(ApiError, match="endpoint returned error"):
            result.raise_for_error()


class TestServerResults:
    """Tests for server payloads."""

    def test_get_server(self, server_payload: dict) -> None:
        result = decode(GetServerResult, _envelope(success=True, server=server_payload))

        server = result.server
        assert server.id == "abc123"
        assert server.gpu_count == 2
        assert server.cost.hour_on == 0.48
        assert server.link("dashboard") == "https://console.tensordock.com/servers/abc123"

    def test_missing_fields_default_empty(self) -> None:
        result = decode(GetServerResult, _envelope(success=True, server={"id": "x"}))
        assert result.server.name == ""
        assert result.server.ram == 0
        assert result.server.cost.charged == 0.0
        assert result.server.link("dashboard") is None

    def test_null_fields_default_empty(self, server_payload: dict) -> None:
        """A server still deploying has no IP yet."""
        payload = {**server_payload, "status": "deploying", "ip": None, "cost": None, "links": None}

        result = decode(GetServerResult, _envelope(success=True, server=payload))

        assert result.server.ip == ""
        assert result.server.status == "deploying"
        assert result.server.cost.charged == 0.0
        assert result.server.link("dashboard") is None

    def test_null_scalars_in_other_results(self) -> None:
        billing = decode(BillingResult, _envelope(success=True, balance=None, hourly_spending_rate=0.5))
        assert billing.balance == 0.0

        deployed = decode(DeployServerResult, _envelope(success=True, server={"id": "new1", "ip": None}))
        assert deployed.server.ip == ""

        assert CpuStockEntry.model_validate({"available_now": None}).available_now == ""

    def test_wrong_field_type_is_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="GetServerResult"):
            decode(GetServerResult, _envelope(success=True, server={"gpu_count": "two"}))

    def test_list_servers_keyed_by_id(self, server_payload: dict) -> None:
        result = decode(
            ListServersResult,
            _envelope(success=True, servers={"abc123": server_payload}),
        )
        assert list(result.servers) == ["abc123"]
        assert result.servers["abc123"].name == "trainer"

    def test_empty_list(self) -> None:
        assert decode(ListServersResult, _envelope(success=True)).servers == {}

    def test_deployed_server(self) -> None:
        result = decode(
            DeployServerResult,
            _envelope(success=True, server={"id": "new1", "ip": "198.51.100.7", "links": []}),
        )
        assert result.server.id == "new1"
        assert result.server.ip == "198.51.100.7"

    def test_link_without_href(self) -> None:
        record = ServerRecord(links={"dashboard": {}})
        assert record.link("dashboard") is None


class TestBillingAndStock:
    """Tests for billing and stock payloads."""

    def test_billing(self) -> None:
        result = decode(BillingResult, _envelope(success=True, balance=42.5, hourly_spending_rate=0.75))
        assert result.balance == 42.5
        assert result.hourly_spending_rate == 0.75

    def test_gpu_stock_in_stock(self) -> None:
        assert GpuStockEntry(available_now=0, available_reserve=3).in_stock
        assert not GpuStockEntry(available_now=0, available_reserve=0).in_stock

    def test_cpu_stock_number_becomes_string(self) -> None:
        assert CpuStockEntry(available_now=12).available_now == "12"

    def test_cpu_stock_none_sentinel(self) -> None:
        assert not CpuStockEntry(available_now="None").in_stock
        assert CpuStockEntry(available_now="4").in_stock

    def test_cpu_stock_result(self) -> None:
        result = decode(
            CpuStockResult,
            _envelope(success=True, stock={"Intel_Xeon_v4": {"na-us-chi-1": {"available_now": 8}}}),
        )
        assert result.stock["Intel_Xeon_v4"]["na-us-chi-1"].available_now == "8"


class TestModifySpec:
    """Tests for modify spec helpers."""

    def test_present_fields_in_declaration_order(self) -> None:
        spec = ModifySpec(ram=16, instance_type="gpu")
        assert list(spec.present_fields()) == ["instance_type", "ram"]

    def test_from_record_restates_hardware(self, server_payload: dict) -> None:
        spec = ModifySpec.from_record(ServerRecord(**server_payload))

        assert spec.present_fields() == {
            "instance_type": "gpu",
            "gpu_model": "Quadro_4000",
            "gpu_count": 2,
            "vcpus": 4,
            "ram": 16,
            "storage": 100,
        }

    def test_from_record_lowercases_type(self) -> None:
        spec = ModifySpec.from_record(ServerRecord(type="CPU", cpu_model="AMD_EPYC"))
        assert spec.instance_type == "cpu"
        assert spec.cpu_model == "AMD_EPYC"

    def test_from_record_skips_empty_values(self) -> None:
        assert ModifySpec.from_record(ServerRecord()).present_fields() == {}

    def test_merged_overlays_changes(self) -> None:
        spec = ModifySpec(ram=4, vcpus=2).merged(ram=16, storage=None)
        assert spec.present_fields() == {"vcpus": 2, "ram": 16}

    def test_merged_returns_new_spec(self) -> None:
        original = ModifySpec(ram=4)
        original.merged(ram=8)
        assert original.ram == 4
