"""Pydantic schemas for pm_analytics requests and responses.

Presentation precision: prices 4 decimals, USD 2, slippage 1, other
percentages 2. Domain values stay unrounded until they reach these models.
"""

from pydantic import BaseModel, Field

from src.pm_analytics.domain.models import (
    EfficiencyReport,
    LiquidityReport,
    PortfolioExitSummary,
    PositionExit,
    PositionInput,
    SlippageResult,
)
from src.pm_common.datetime_utils import utc_now_iso
from src.pm_common.precision import (
    round_percent,
    round_price,
    round_slippage,
    round_usd,
    to_cents,
)

# ---------------------------------------------------------------------------
# Slippage
# ---------------------------------------------------------------------------


class SlippageOut(BaseModel):
    target_usd: float
    amount_filled: float
    avg_price: float
    worst_price: float
    slippage_percent: float
    can_fill: bool

    @classmethod
    def from_domain(cls, r: SlippageResult) -> "SlippageOut":
        return cls(
            target_usd=round_usd(r.target_usd),
            amount_filled=round_usd(r.amount_filled),
            avg_price=round_price(r.avg_price),
            worst_price=round_price(r.worst_price),
            slippage_percent=round_slippage(r.slippage_percent),
            can_fill=r.can_fill,
        )


class SlippageResponse(BaseModel):
    token_id: str
    market_id: str | None
    reference_price: float
    simulation: SlippageOut
    fetched_at: str = Field(default_factory=utc_now_iso)


# ---------------------------------------------------------------------------
# Liquidity
# ---------------------------------------------------------------------------


class SpreadOut(BaseModel):
    best_bid: float
    best_ask: float
    spread: float
    spread_cents: float
    spread_bps: float
    crossed: bool


class DepthOut(BaseModel):
    bid_depth_usd: float
    ask_depth_usd: float
    total_depth_usd: float
    window_pct: float | None
    includes_synthetic: bool


class LiquidityResponse(BaseModel):
    token_id: str
    market_id: str | None
    reference_price: float
    spread: SpreadOut
    depth: DepthOut
    whale_cost: dict[str, SlippageOut]
    liquidity_score: str
    recommendation: str
    fetched_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_domain(cls, r: LiquidityReport) -> "LiquidityResponse":
        return cls(
            token_id=r.token_id,
            market_id=r.market_id,
            reference_price=round_price(r.reference_price),
            spread=SpreadOut(
                best_bid=round_price(r.best_bid),
                best_ask=round_price(r.best_ask),
                spread=round_price(r.spread),
                spread_cents=to_cents(r.spread),
                spread_bps=round_slippage(r.spread_bps),
                crossed=r.crossed,
            ),
            depth=DepthOut(
                bid_depth_usd=round_usd(r.depth.bid_depth_usd),
                ask_depth_usd=round_usd(r.depth.ask_depth_usd),
                total_depth_usd=round_usd(r.depth.total_depth_usd),
                window_pct=r.depth.window_pct,
                includes_synthetic=r.has_synthetic,
            ),
            whale_cost={
                f"sell_{size:g}": SlippageOut.from_domain(res)
                for size, res in r.whale_cost.items()
            },
            liquidity_score=r.tier.value,
            recommendation=r.recommendation,
        )


# ---------------------------------------------------------------------------
# Efficiency
# ---------------------------------------------------------------------------


class OutcomePriceOut(BaseModel):
    name: str
    token_id: str
    price: float
    implied_probability: float
    true_probability: float
    defaulted: bool


class EfficiencyOut(BaseModel):
    sum_of_outcomes: float
    vig: float
    vig_bps: float
    is_efficient: bool
    efficiency: str


class SpreadInfoOut(BaseModel):
    bid_ask_spread: float
    spread_cents: float


class EfficiencyResponse(BaseModel):
    market: str
    market_id: str
    outcomes: list[OutcomePriceOut]
    market_efficiency: EfficiencyOut
    true_probabilities: list[float]
    spread_info: SpreadInfoOut | None
    recommendation: str
    fetched_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_domain(
        cls,
        market: str,
        market_id: str,
        token_ids: tuple[str, str],
        report: EfficiencyReport,
        spread: float | None,
        recommendation: str,
    ) -> "EfficiencyResponse":
        outcomes = [
            OutcomePriceOut(
                name=name,
                token_id=token_ids[i],
                price=round_price(report.outcome_prices[i]),
                implied_probability=round_percent(report.outcome_prices[i] * 100),
                true_probability=round_percent(report.true_probabilities[i] * 100),
                defaulted=report.defaulted[i],
            )
            for i, name in enumerate(("YES", "NO"))
        ]
        return cls(
            market=market or market_id,
            market_id=market_id,
            outcomes=outcomes,
            market_efficiency=EfficiencyOut(
                sum_of_outcomes=round_price(report.sum_of_outcomes),
                vig=round_price(report.vig),
                vig_bps=round_slippage(report.vig_bps),
                is_efficient=report.is_efficient,
                efficiency=report.rating.value,
            ),
            true_probabilities=[round_price(p) for p in report.true_probabilities],
            spread_info=(
                SpreadInfoOut(bid_ask_spread=round_price(spread), spread_cents=to_cents(spread))
                if spread is not None
                else None
            ),
            recommendation=recommendation,
        )


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


class PositionIn(BaseModel):
    token_id: str
    outcome: str = "YES"
    shares: float = Field(ge=0)
    avg_entry_price: float = Field(ge=0, le=1)
    title: str | None = None
    market_id: str | None = None

    def to_domain(self) -> PositionInput:
        return PositionInput(
            token_id=self.token_id,
            outcome=self.outcome,
            shares=self.shares,
            avg_entry_price=self.avg_entry_price,
            title=self.title,
            market_id=self.market_id,
        )


class PositionsRequest(BaseModel):
    positions: list[PositionIn]


class PositionExitOut(BaseModel):
    token_id: str
    title: str
    outcome: str
    shares: float
    avg_entry_price: float
    current_price: float
    position_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    exit: SlippageOut | None
    can_exit_cleanly: bool
    liquidity_score: str
    recommendation: str

    @classmethod
    def from_domain(cls, e: PositionExit) -> "PositionExitOut":
        p = e.position
        return cls(
            token_id=p.token_id,
            title=p.title or p.market_id or p.token_id,
            outcome=p.outcome,
            shares=p.shares,
            avg_entry_price=p.avg_entry_price,
            current_price=round_price(e.current_price),
            position_value=round_usd(e.position_value),
            unrealized_pnl=round_usd(e.unrealized_pnl),
            unrealized_pnl_percent=round_percent(e.unrealized_pnl_percent),
            exit=SlippageOut.from_domain(e.exit) if e.exit else None,
            can_exit_cleanly=e.can_exit_cleanly,
            liquidity_score=e.tier.value if e.tier else "unknown",
            recommendation=e.recommendation,
        )


class PortfolioSummaryOut(BaseModel):
    total_value: float
    total_unrealized_pnl: float
    total_unrealized_pnl_percent: float
    risky_positions: int


class PositionsResponse(BaseModel):
    total_positions: int
    portfolio_summary: PortfolioSummaryOut
    position_analyses: list[PositionExitOut]
    overall_recommendation: str
    fetched_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_domain(cls, s: PortfolioExitSummary) -> "PositionsResponse":
        return cls(
            total_positions=len(s.positions),
            portfolio_summary=PortfolioSummaryOut(
                total_value=round_usd(s.total_value),
                total_unrealized_pnl=round_usd(s.total_unrealized_pnl),
                total_unrealized_pnl_percent=round_percent(s.total_unrealized_pnl_percent),
                risky_positions=s.risky_positions,
            ),
            position_analyses=[PositionExitOut.from_domain(e) for e in s.positions],
            overall_recommendation=s.recommendation,
        )
