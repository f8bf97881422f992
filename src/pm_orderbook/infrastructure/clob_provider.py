"""HTTP Market Data Provider over the public CLOB and Gamma APIs.

One shared httpx.AsyncClient per process, created lazily and closed in the
app lifespan. Every transport, status or decoding failure surfaces as
ProviderFetchError so callers have one thing to catch.
"""

import logging
from typing import Any

import httpx

from config.settings import settings
from src.pm_common.errors import (
    MarketTokensNotFoundError,
    ProviderFetchError,
    ProviderTimeoutError,
)
from src.pm_orderbook.domain.models import MarketTokens, RawOrderBook
from src.pm_orderbook.domain.provider import CandidateMarket
from src.pm_orderbook.infrastructure.normalizer import (
    parse_candidate_markets,
    parse_market_tokens,
    parse_order_book,
    parse_reference_price,
)

logger = logging.getLogger(__name__)


class ClobMarketDataProvider:
    def __init__(
        self,
        client: httpx.AsyncClient,
        clob_url: str | None = None,
        gamma_url: str | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self._client = client
        self._clob_url = (clob_url or settings.CLOB_API_URL).rstrip("/")
        self._gamma_url = (gamma_url or settings.GAMMA_API_URL).rstrip("/")
        self._timeout_s = timeout_s or settings.REQUEST_TIMEOUT_SECONDS

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(
                method, url, timeout=self._timeout_s, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(url, self._timeout_s) from exc
        except httpx.HTTPStatusError as exc:
            body = exc.response.text[:200]
            raise ProviderFetchError(
                f"{exc.response.status_code} from {url}: {body}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderFetchError(f"{type(exc).__name__} for {url}") from exc
        except ValueError as exc:  # JSON decode
            raise ProviderFetchError(f"malformed JSON from {url}") from exc

    async def fetch_order_book(self, token_id: str) -> RawOrderBook:
        payload = await self._request(
            "GET", f"{self._clob_url}/book", params={"token_id": token_id}
        )
        try:
            return parse_order_book(token_id, payload)
        except ValueError as exc:
            raise ProviderFetchError(f"malformed order book for {token_id}") from exc

    async def fetch_market_tokens(self, market_id: str) -> MarketTokens:
        payload = await self._request("GET", f"{self._clob_url}/markets/{market_id}")
        tokens = parse_market_tokens(market_id, payload)
        if tokens is None:
            raise MarketTokensNotFoundError(market_id)
        return tokens

    async def fetch_reference_price(self, token_id: str, side: str = "BUY") -> float | None:
        payload = await self._request(
            "POST",
            f"{self._clob_url}/prices",
            json=[{"token_id": token_id, "side": side}],
        )
        return parse_reference_price(payload, token_id, side)

    async def list_candidate_markets(
        self, limit: int, category: str | None = None
    ) -> list[CandidateMarket]:
        params: dict[str, Any] = {
            "closed": "false",
            "limit": limit,
            "order": "liquidity",
            "ascending": "false",
        }
        if category:
            params["category"] = category
        events = await self._request("GET", f"{self._gamma_url}/events", params=params)
        candidates = parse_candidate_markets(events)
        logger.info("Gamma discovery: %d events → %d binary candidates",
                    len(events) if isinstance(events, list) else 0, len(candidates))
        return candidates


_http_client: httpx.AsyncClient | None = None
_provider: ClobMarketDataProvider | None = None


def get_market_data_provider() -> ClobMarketDataProvider:
    """Get or create the process-wide provider (FastAPI dependency)."""
    global _http_client, _provider  # noqa: PLW0603
    if _provider is None:
        _http_client = httpx.AsyncClient(
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
        )
        _provider = ClobMarketDataProvider(_http_client)
    return _provider


async def close_market_data_provider() -> None:
    """Close the shared HTTP client."""
    global _http_client, _provider  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
    _http_client = None
    _provider = None
