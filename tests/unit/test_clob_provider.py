"""Unit tests for ClobMarketDataProvider over httpx.MockTransport."""

import json

import httpx
import pytest

from src.pm_common.errors import (
    MarketTokensNotFoundError,
    ProviderFetchError,
    ProviderTimeoutError,
)
from src.pm_orderbook.infrastructure.clob_provider import ClobMarketDataProvider

CLOB = "https://clob.test"
GAMMA = "https://gamma.test"


def _provider(handler) -> ClobMarketDataProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ClobMarketDataProvider(client, clob_url=CLOB, gamma_url=GAMMA, timeout_s=1.0)


class TestFetchOrderBook:
    @pytest.mark.asyncio
    async def test_parses_book(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/book"
            assert request.url.params["token_id"] == "111"
            return httpx.Response(200, json={
                "market": "0xmkt", "asset_id": "111",
                "bids": [{"price": "0.48", "size": "10"}],
                "asks": [{"price": "0.52", "size": "20"}],
            })

        book = await _provider(handler).fetch_order_book("111")

        assert book.market_id == "0xmkt"
        assert book.bids[0].price == 0.48

    @pytest.mark.asyncio
    async def test_http_error_maps_to_fetch_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(ProviderFetchError) as exc_info:
            await provider.fetch_order_book("111")
        assert exc_info.value.code == 6001
        assert "503" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_maps_to_timeout_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ProviderTimeoutError):
            await _provider(handler).fetch_order_book("111")

    @pytest.mark.asyncio
    async def test_connect_error_maps_to_fetch_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ProviderFetchError):
            await _provider(handler).fetch_order_book("111")

    @pytest.mark.asyncio
    async def test_malformed_json(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ProviderFetchError):
            await provider.fetch_order_book("111")

    @pytest.mark.asyncio
    async def test_non_object_payload(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(ProviderFetchError):
            await provider.fetch_order_book("111")


class TestFetchMarketTokens:
    @pytest.mark.asyncio
    async def test_resolves_pair(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/markets/0xmkt"
            return httpx.Response(200, json={
                "condition_id": "0xmkt", "question": "Rain?",
                "tokens": [{"token_id": "1", "price": 0.6}, {"token_id": "2", "price": 0.4}],
            })

        tokens = await _provider(handler).fetch_market_tokens("0xmkt")

        assert tokens.complement_of("1") == "2"
        assert tokens.question == "Rain?"

    @pytest.mark.asyncio
    async def test_unresolvable_market(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"tokens": []}))

        with pytest.raises(MarketTokensNotFoundError):
            await provider.fetch_market_tokens("0xmkt")


class TestFetchReferencePrice:
    @pytest.mark.asyncio
    async def test_posts_token_and_side(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.url.path == "/prices"
            assert json.loads(request.content) == [{"token_id": "1", "side": "BUY"}]
            return httpx.Response(200, json={"1": {"BUY": "0.61"}})

        assert await _provider(handler).fetch_reference_price("1") == 0.61


class TestListCandidateMarkets:
    @pytest.mark.asyncio
    async def test_queries_gamma(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == "gamma.test"
            assert request.url.params["closed"] == "false"
            assert request.url.params["order"] == "liquidity"
            assert request.url.params["category"] == "politics"
            return httpx.Response(200, json=[{
                "markets": [{
                    "conditionId": "0xa", "question": "Q?",
                    "clobTokenIds": ["1", "2"], "outcomePrices": ["0.3", "0.7"],
                }],
            }])

        candidates = await _provider(handler).list_candidate_markets(10, "politics")

        assert [c.market_id for c in candidates] == ["0xa"]
