"""Domain models for pm_arbitrage: pure dataclasses, no business logic."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MarketQuote:
    """Merged top-of-book for both outcomes of one market at scan time."""

    market_id: str
    question: str
    best_ask_a: float | None  # None = no asks on the merged ladder
    best_bid_a: float | None
    best_ask_b: float | None
    liquidity: float = 0.0
    crossed_a: bool = False


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """Buy both outcomes for less than the $1 payout."""

    market_id: str
    question: str
    buy_yes_at: float
    buy_no_at: float
    liquidity: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.buy_yes_at + self.buy_no_at

    @property
    def edge(self) -> float:
        return 1 - self.total_cost


@dataclass(frozen=True)
class WideSpreadCandidate:
    market_id: str
    question: str
    best_bid: float
    best_ask: float

    @property
    def spread(self) -> float:
        return self.best_ask - self.best_bid

    @property
    def mid_price(self) -> float:
        return (self.best_ask + self.best_bid) / 2


@dataclass
class ScanResult:
    opportunities: list[ArbitrageOpportunity] = field(default_factory=list)
    wide_spreads: list[WideSpreadCandidate] = field(default_factory=list)
    scanned_markets: int = 0  # markets with two-sided quotes evaluated
    failed_markets: int = 0   # fetch failed or timed out
    skipped_markets: int = 0  # never started: deadline or cancellation
    total_spread: float = 0.0
    spread_samples: int = 0
    partial: bool = False
    arbitrage_threshold: float = 0.0
    wide_spread_threshold: float = 0.0

    @property
    def average_spread(self) -> float:
        if self.spread_samples == 0:
            return 0.0
        return self.total_spread / self.spread_samples
