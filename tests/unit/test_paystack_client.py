"""Unit tests for the Paystack client using httpx.MockTransport."""
import json
from typing import Any

import httpx
import pytest

from src.om_common.errors import GatewayQueryError
from src.om_payment.infrastructure.paystack_client import PaystackClient


def _client(handler: Any) -> PaystackClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://api.paystack.co")
    return PaystackClient("sk_test_123", client=http)


class TestInitiate:
    async def test_returns_authorization_url(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "status": True,
                "data": {"authorization_url": "https://checkout.paystack.com/abc", "reference": "ref-1"},
            })

        url = await _client(handler).initiate(
            "a@example.com", 100000, "ref-1", "https://shop/cb", {"orderId": "o-1"}
        )

        assert url == "https://checkout.paystack.com/abc"
        assert seen["path"] == "/transaction/initialize"
        assert seen["auth"] == "Bearer sk_test_123"
        assert seen["body"] == {
            "email": "a@example.com",
            "amount": 100000,
            "reference": "ref-1",
            "metadata": {"orderId": "o-1"},
            "callback_url": "https://shop/cb",
        }

    async def test_callback_omitted_when_blank(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": True, "data": {"authorization_url": "u"}})

        await _client(handler).initiate("a@example.com", 100, "ref-1", "", {})
        assert "callback_url" not in seen["body"]

    async def test_status_false_is_failure(self) -> None:
        client = _client(lambda r: httpx.Response(200, json={"status": False, "message": "Duplicate"}))
        assert await client.initiate("a@example.com", 100, "ref-1", "", {}) is None

    async def test_http_error_is_failure(self) -> None:
        client = _client(lambda r: httpx.Response(401, json={"status": False, "message": "Invalid key"}))
        assert await client.initiate("a@example.com", 100, "ref-1", "", {}) is None

    async def test_transport_error_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        assert await _client(handler).initiate("a@example.com", 100, "ref-1", "", {}) is None


class TestQueryStatus:
    async def test_returns_settlement(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            return httpx.Response(200, json={
                "status": True,
                "data": {"reference": "ref-1", "status": "success", "amount": 100000},
            })

        result = await _client(handler).query_status("ref-1")

        assert seen["path"] == "/transaction/verify/ref-1"
        assert result is not None
        assert result.status == "success"
        assert result.raw["amount"] == 100000

    async def test_missing_data_returns_none(self) -> None:
        client = _client(lambda r: httpx.Response(200, json={"status": True, "data": None}))
        assert await client.query_status("ref-1") is None

    async def test_http_error_raises(self) -> None:
        client = _client(lambda r: httpx.Response(500, json={"status": False}))
        with pytest.raises(GatewayQueryError):
            await client.query_status("ref-1")

    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("reset", request=request)

        with pytest.raises(GatewayQueryError):
            await _client(handler).query_status("ref-1")
