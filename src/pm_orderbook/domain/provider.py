# src/pm_orderbook/domain/provider.py
"""Market Data Provider Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real HTTP implementation.

Every method may raise ProviderFetchError (timeout, non-2xx, malformed
payload). Single-market callers propagate it; batch callers skip the market.
"""

from dataclasses import dataclass
from typing import Protocol

from src.pm_orderbook.domain.models import MarketTokens, RawOrderBook


@dataclass(frozen=True)
class CandidateMarket:
    """A scan candidate; tokens may be unresolved when only the id is known."""

    market_id: str
    question: str = ""
    token_a: str | None = None
    token_b: str | None = None
    liquidity: float = 0.0


class MarketDataProvider(Protocol):
    async def fetch_order_book(self, token_id: str) -> RawOrderBook: ...

    async def fetch_market_tokens(self, market_id: str) -> MarketTokens: ...

    async def fetch_reference_price(
        self, token_id: str, side: str = "BUY"
    ) -> float | None: ...

    async def list_candidate_markets(
        self, limit: int, category: str | None = None
    ) -> list[CandidateMarket]: ...
