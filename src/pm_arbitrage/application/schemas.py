"""Pydantic schemas for pm_arbitrage API requests and responses."""

from pydantic import BaseModel, Field

from src.pm_arbitrage.domain.models import (
    ArbitrageOpportunity,
    ScanResult,
    WideSpreadCandidate,
)
from src.pm_common.datetime_utils import utc_now_iso
from src.pm_common.precision import round_percent, round_price, to_cents

MAX_OPPORTUNITIES = 10
MAX_WIDE_SPREADS = 5


class ScanRequest(BaseModel):
    market_ids: list[str] = Field(min_length=1)
    deadline_seconds: float | None = Field(None, gt=0)


class ArbitrageOpportunityOut(BaseModel):
    market: str
    market_id: str
    buy_yes_at: float
    buy_no_at: float
    total_cost: float
    edge: float
    edge_percent: float
    liquidity: float
    note: str

    @classmethod
    def from_domain(cls, o: ArbitrageOpportunity) -> "ArbitrageOpportunityOut":
        return cls(
            market=o.question or o.market_id,
            market_id=o.market_id,
            buy_yes_at=round_price(o.buy_yes_at),
            buy_no_at=round_price(o.buy_no_at),
            total_cost=round_price(o.total_cost),
            edge=round_price(o.edge),
            edge_percent=round_percent(o.edge * 100),
            liquidity=o.liquidity,
            note=(
                f"BUY YES @ {o.buy_yes_at * 100:.1f}c + BUY NO @ {o.buy_no_at * 100:.1f}c "
                f"= {o.total_cost * 100:.1f}c. Locks in {o.edge * 100:.1f}c per $1 payout."
            ),
        )


class WideSpreadOut(BaseModel):
    market: str
    market_id: str
    best_bid: float
    best_ask: float
    spread: float
    spread_cents: float
    mid_price: float

    @classmethod
    def from_domain(cls, w: WideSpreadCandidate) -> "WideSpreadOut":
        return cls(
            market=w.question or w.market_id,
            market_id=w.market_id,
            best_bid=round_price(w.best_bid),
            best_ask=round_price(w.best_ask),
            spread=round_price(w.spread),
            spread_cents=to_cents(w.spread),
            mid_price=round_price(w.mid_price),
        )


class ScanSummaryOut(BaseModel):
    arbitrage_count: int
    wide_spread_count: int
    average_spread_cents: float
    arbitrage_threshold: float
    wide_spread_threshold: float
    summary_note: str


class ScanResponse(BaseModel):
    candidate_markets: int
    scanned_markets: int
    failed_markets: int
    skipped_markets: int
    partial: bool
    arbitrage_opportunities: list[ArbitrageOpportunityOut]
    wide_spread_markets: list[WideSpreadOut]
    summary: ScanSummaryOut
    methodology: str = (
        "Fetched both outcome order books, merged direct and synthetic liquidity, "
        "and checked whether buying YES and NO at the merged best asks costs less "
        "than the threshold. Executable prices, not midpoints."
    )
    fetched_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_domain(cls, r: ScanResult, candidates: int) -> "ScanResponse":
        return cls(
            candidate_markets=candidates,
            scanned_markets=r.scanned_markets,
            failed_markets=r.failed_markets,
            skipped_markets=r.skipped_markets,
            partial=r.partial,
            arbitrage_opportunities=[
                ArbitrageOpportunityOut.from_domain(o)
                for o in r.opportunities[:MAX_OPPORTUNITIES]
            ],
            wide_spread_markets=[
                WideSpreadOut.from_domain(w) for w in r.wide_spreads[:MAX_WIDE_SPREADS]
            ],
            summary=ScanSummaryOut(
                arbitrage_count=len(r.opportunities),
                wide_spread_count=len(r.wide_spreads),
                average_spread_cents=round_percent(r.average_spread * 100),
                arbitrage_threshold=r.arbitrage_threshold,
                wide_spread_threshold=r.wide_spread_threshold,
                summary_note=_summary_note(r),
            ),
        )


def _summary_note(r: ScanResult) -> str:
    suffix = " Scan stopped early; results are partial." if r.partial else ""
    if r.opportunities:
        return (
            f"Found {len(r.opportunities)} arbitrage opportunities: "
            f"buying both outcomes costs less than the payout.{suffix}"
        )
    if r.scanned_markets == 0:
        return f"Could not fetch order book data. Try again or reduce the limit.{suffix}"
    return (
        f"No arbitrage found in {r.scanned_markets} markets. "
        f"Average spread: {r.average_spread * 100:.1f}c.{suffix}"
    )
