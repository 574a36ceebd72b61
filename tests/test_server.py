"""Tests for api/server.py: HTTP routing over a real socket."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from api.server import QuoteServer
from core.exceptions import OracleError
from models.quote import QuoteRequest, QuoteResponse

from .helpers import ETH, USDT, USER_ADDRESS

QUOTE_PAYLOAD = {
    "chainId": 1,
    "fromToken": {"address": ETH, "decimals": 18},
    "toToken": {"address": USDT, "decimals": 6},
    "sellAmount": "1",
    "feeFactor": 0,
    "userAddress": USER_ADDRESS,
    "isIntermediateSwap": False,
}


@pytest.fixture
def engine() -> MagicMock:
    e = MagicMock()
    e.quote = AsyncMock(return_value=QuoteResponse(exchangeable=True, offers=[]))
    return e


@pytest_asyncio.fixture
async def client(engine: MagicMock):
    async with QuoteServer(engine, host="127.0.0.1", port=0) as server:
        async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{server.port}") as c:
            yield c


class TestQuoteEndpoint:

    @pytest.mark.asyncio
    async def test_quote(self, client: httpx.AsyncClient, engine: MagicMock):
        resp = await client.post("/quote", json=QUOTE_PAYLOAD)
        assert resp.status_code == 200
        assert resp.json() == {"exchangeable": True, "offers": []}

        engine.quote.assert_awaited_once()
        request = engine.quote.await_args.args[0]
        assert isinstance(request, QuoteRequest)
        assert request.chain_id == 1

    @pytest.mark.asyncio
    async def test_not_exchangeable(self, client: httpx.AsyncClient, engine: MagicMock):
        engine.quote.return_value = QuoteResponse.unsupported()
        resp = await client.post("/quote", json={**QUOTE_PAYLOAD, "isIntermediateSwap": True})
        assert resp.status_code == 200
        assert resp.json() == {"exchangeable": False, "message": "unsupported quote request"}

    @pytest.mark.asyncio
    async def test_invalid_payload(self, client: httpx.AsyncClient, engine: MagicMock):
        resp = await client.post("/quote", json={**QUOTE_PAYLOAD, "sellAmount": "-1"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid quote request"
        engine.quote.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sell_amount_beyond_uint256(self, client: httpx.AsyncClient, engine: MagicMock):
        resp = await client.post("/quote", json={**QUOTE_PAYLOAD, "sellAmount": "1e70"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid quote request"
        engine.quote.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_json(self, client: httpx.AsyncClient):
        resp = await client.post(
            "/quote",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("invalid JSON")

    @pytest.mark.asyncio
    async def test_engine_failure_is_500(self, client: httpx.AsyncClient, engine: MagicMock):
        engine.quote.side_effect = OracleError("rpc down", chain_id=1, token=USDT)
        resp = await client.post("/quote", json=QUOTE_PAYLOAD)
        assert resp.status_code == 500
        assert resp.json() == {"error": "OracleError", "message": "rpc down"}


class TestNotificationEndpoints:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/deal", "/exception"])
    async def test_acknowledged(self, client: httpx.AsyncClient, path: str):
        resp = await client.post(path, json={"offerHash": "0xabc", "status": "filled"})
        assert resp.status_code == 200
        assert resp.json() == {"result": True, "message": "ok"}


class TestRouting:

    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test_unknown_path(self, client: httpx.AsyncClient):
        resp = await client.get("/nope")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_method(self, client: httpx.AsyncClient):
        resp = await client.get("/quote")
        assert resp.status_code == 405
