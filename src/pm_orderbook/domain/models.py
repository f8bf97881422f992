"""Domain models for pm_orderbook: pure dataclasses, no I/O.

All entities are transient: built per request from a live provider snapshot.
"""

from dataclasses import dataclass, field

from src.pm_common.enums import LevelOrigin


@dataclass(frozen=True)
class PriceLevel:
    """Provider-normalized level: price on the 0-1 scale, size in shares."""

    price: float
    size: float


@dataclass(frozen=True)
class OrderLevel:
    """Single level of a merged ladder."""

    price: float
    size: float
    origin: LevelOrigin = LevelOrigin.DIRECT

    @property
    def value_usd(self) -> float:
        return self.price * self.size


@dataclass
class RawOrderBook:
    """Direct levels of one outcome token as returned by the provider."""

    token_id: str
    market_id: str | None = None
    bids: list[PriceLevel] = field(default_factory=list)
    asks: list[PriceLevel] = field(default_factory=list)


@dataclass(frozen=True)
class OutcomeToken:
    token_id: str
    market_id: str | None = None
    complement_token_id: str | None = None  # None = pairing unresolved


@dataclass(frozen=True)
class MarketTokens:
    """A binary market resolved to its two complementary outcome tokens."""

    market_id: str
    token_a: str
    token_b: str
    question: str = ""
    outcome_prices: tuple[float | None, float | None] = (None, None)

    def complement_of(self, token_id: str) -> str | None:
        if token_id == self.token_a:
            return self.token_b
        if token_id == self.token_b:
            return self.token_a
        return None


@dataclass
class MergedOrderBook:
    """Merged ladder for one token.

    bids descending by price, asks ascending. A crossed book (best bid above
    best ask) is allowed and surfaced, not rejected.
    """

    token_id: str
    bids: list[OrderLevel] = field(default_factory=list)
    asks: list[OrderLevel] = field(default_factory=list)
    market_id: str | None = None
    complement_token_id: str | None = None

    @property
    def best_bid(self) -> float:
        """0 = no bids."""
        return self.bids[0].price if self.bids else 0.0

    @property
    def best_ask(self) -> float:
        """1 = no asks."""
        return self.asks[0].price if self.asks else 1.0

    @property
    def spread(self) -> float:
        return self.best_ask - self.best_bid

    @property
    def mid_price(self) -> float:
        return (self.best_bid + self.best_ask) / 2

    @property
    def is_empty(self) -> bool:
        return not self.bids and not self.asks

    @property
    def is_crossed(self) -> bool:
        return bool(self.bids and self.asks) and self.best_bid > self.best_ask

    @property
    def has_synthetic(self) -> bool:
        return any(
            lv.origin == LevelOrigin.SYNTHETIC for lv in (*self.bids, *self.asks)
        )
