"""Shared test fixtures."""

import asyncio

import pytest

from src.pm_common.errors import MarketTokensNotFoundError, ProviderFetchError
from src.pm_orderbook.domain.models import MarketTokens, PriceLevel, RawOrderBook
from src.pm_orderbook.domain.provider import CandidateMarket


def levels(*pairs: tuple[float, float]) -> list[PriceLevel]:
    return [PriceLevel(price=p, size=s) for p, s in pairs]


class FakeProvider:
    """In-memory MarketDataProvider.

    Books and markets are registered up front; token ids listed in `failing`
    raise ProviderFetchError, those in `slow` sleep for `slow_delay` first.
    """

    def __init__(self) -> None:
        self.books: dict[str, RawOrderBook] = {}
        self.markets: dict[str, MarketTokens] = {}
        self.prices: dict[str, float | None] = {}
        self.candidates: list[CandidateMarket] = []
        self.failing: set[str] = set()
        self.slow: set[str] = set()
        self.slow_delay = 5.0
        self.book_calls: list[str] = []

    def add_book(
        self,
        token_id: str,
        bids: list[tuple[float, float]] = (),
        asks: list[tuple[float, float]] = (),
        market_id: str | None = None,
    ) -> RawOrderBook:
        book = RawOrderBook(
            token_id=token_id, market_id=market_id, bids=levels(*bids), asks=levels(*asks)
        )
        self.books[token_id] = book
        return book

    def add_market(
        self,
        market_id: str,
        token_a: str,
        token_b: str,
        question: str = "",
        outcome_prices: tuple[float | None, float | None] = (None, None),
    ) -> MarketTokens:
        tokens = MarketTokens(
            market_id=market_id, token_a=token_a, token_b=token_b,
            question=question, outcome_prices=outcome_prices,
        )
        self.markets[market_id] = tokens
        return tokens

    async def _maybe_fail(self, key: str) -> None:
        if key in self.slow:
            await asyncio.sleep(self.slow_delay)
        if key in self.failing:
            raise ProviderFetchError(f"503 for {key}")

    async def fetch_order_book(self, token_id: str) -> RawOrderBook:
        self.book_calls.append(token_id)
        await self._maybe_fail(token_id)
        if token_id not in self.books:
            raise ProviderFetchError(f"404 for {token_id}")
        src = self.books[token_id]
        return RawOrderBook(
            token_id=src.token_id, market_id=src.market_id,
            bids=list(src.bids), asks=list(src.asks),
        )

    async def fetch_market_tokens(self, market_id: str) -> MarketTokens:
        await self._maybe_fail(market_id)
        if market_id not in self.markets:
            raise MarketTokensNotFoundError(market_id)
        return self.markets[market_id]

    async def fetch_reference_price(self, token_id: str, side: str = "BUY") -> float | None:
        if f"price:{token_id}" in self.failing:
            raise ProviderFetchError(f"price feed down for {token_id}")
        return self.prices.get(token_id)

    async def list_candidate_markets(
        self, limit: int, category: str | None = None
    ) -> list[CandidateMarket]:
        if "discovery" in self.failing:
            raise ProviderFetchError("gamma unavailable")
        return self.candidates[:limit]


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def binary_market(provider: FakeProvider) -> FakeProvider:
    """One market MKT-1 with YES/NO books that merge into each other.

    YES: bids 0.48x1000, asks 0.52x800
    NO:  bids 0.47x500,  asks 0.51x600
    Merged YES: bids 0.49 (synthetic) > 0.48, asks 0.52 (direct) < 0.53 (synthetic)
    """
    provider.add_market("MKT-1", "YES-1", "NO-1", question="Will it rain?",
                        outcome_prices=(0.5, 0.5))
    provider.add_book("YES-1", bids=[(0.48, 1000)], asks=[(0.52, 800)], market_id="MKT-1")
    provider.add_book("NO-1", bids=[(0.47, 500)], asks=[(0.51, 600)], market_id="MKT-1")
    return provider
