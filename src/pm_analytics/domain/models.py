"""Domain models for pm_analytics: pure dataclasses, full precision."""

from dataclasses import dataclass, field

from src.pm_common.enums import EfficiencyRating, LiquidityTier


@dataclass(frozen=True)
class SlippageResult:
    """Outcome of walking the bid ladder to sell `target_usd` of shares."""

    target_usd: float
    amount_filled: float  # USD actually filled
    shares_filled: float
    avg_price: float
    worst_price: float
    slippage_percent: float
    can_fill: bool


@dataclass(frozen=True)
class DepthSummary:
    bid_depth_usd: float
    ask_depth_usd: float
    window_pct: float | None = None  # None = full visible book

    @property
    def total_depth_usd(self) -> float:
        return self.bid_depth_usd + self.ask_depth_usd


@dataclass
class LiquidityReport:
    token_id: str
    market_id: str | None
    reference_price: float
    best_bid: float
    best_ask: float
    spread: float
    spread_bps: float
    depth: DepthSummary
    whale_cost: dict[float, SlippageResult]  # probe size USD → result
    tier: LiquidityTier
    crossed: bool
    has_synthetic: bool
    recommendation: str = ""


@dataclass(frozen=True)
class EfficiencyReport:
    outcome_prices: tuple[float, float]
    sum_of_outcomes: float
    vig: float
    true_probabilities: tuple[float, float]
    rating: EfficiencyRating
    defaulted: tuple[bool, bool] = (False, False)  # price replaced by 0.5

    @property
    def vig_bps(self) -> float:
        return self.vig * 10000

    @property
    def is_efficient(self) -> bool:
        return abs(self.vig) < 0.02


@dataclass(frozen=True)
class PositionInput:
    token_id: str
    outcome: str
    shares: float
    avg_entry_price: float
    title: str | None = None
    market_id: str | None = None


@dataclass
class PositionExit:
    position: PositionInput
    current_price: float
    position_value: float
    cost_basis: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    exit: SlippageResult | None
    can_exit_cleanly: bool
    tier: LiquidityTier | None  # None = market data unavailable
    recommendation: str


@dataclass
class PortfolioExitSummary:
    positions: list[PositionExit] = field(default_factory=list)
    total_value: float = 0.0
    total_cost_basis: float = 0.0
    total_unrealized_pnl: float = 0.0
    risky_positions: int = 0
    recommendation: str = ""

    @property
    def total_unrealized_pnl_percent(self) -> float:
        if self.total_cost_basis <= 0:
            return 0.0
        return self.total_unrealized_pnl / self.total_cost_basis * 100
