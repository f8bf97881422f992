"""Exit analysis for held positions: what would it cost to sell out now?"""

from collections.abc import Sequence

from src.pm_analytics.domain.models import (
    PortfolioExitSummary,
    PositionExit,
    PositionInput,
    SlippageResult,
)
from src.pm_common.enums import LiquidityTier


def evaluate_position(
    position: PositionInput,
    current_price: float,
    exit_sim: SlippageResult,
    tier: LiquidityTier,
    clean_exit_slippage: float,
) -> PositionExit:
    value = position.shares * current_price
    cost_basis = position.shares * position.avg_entry_price
    pnl = value - cost_basis
    pnl_pct = pnl / cost_basis * 100 if cost_basis > 0 else 0.0
    clean = exit_sim.can_fill and exit_sim.slippage_percent < clean_exit_slippage
    return PositionExit(
        position=position,
        current_price=current_price,
        position_value=value,
        cost_basis=cost_basis,
        unrealized_pnl=pnl,
        unrealized_pnl_percent=pnl_pct,
        exit=exit_sim,
        can_exit_cleanly=clean,
        tier=tier,
        recommendation=position_recommendation(pnl_pct, current_price, tier, clean, exit_sim),
    )


def unavailable_position(position: PositionInput) -> PositionExit:
    """Market data could not be fetched: value at entry, no exit estimate."""
    cost_basis = position.shares * position.avg_entry_price
    return PositionExit(
        position=position,
        current_price=position.avg_entry_price,
        position_value=cost_basis,
        cost_basis=cost_basis,
        unrealized_pnl=0.0,
        unrealized_pnl_percent=0.0,
        exit=None,
        can_exit_cleanly=False,
        tier=None,
        recommendation="Unable to fetch live market data for this position.",
    )


def position_recommendation(
    pnl_pct: float,
    price: float,
    tier: LiquidityTier,
    clean: bool,
    exit_sim: SlippageResult,
) -> str:
    parts: list[str] = []
    if pnl_pct > 50:
        parts.append("Strong gains. Consider taking some profit.")
    elif pnl_pct > 20:
        parts.append("Position is profitable.")
    elif pnl_pct < -20:
        parts.append("Position underwater. Evaluate if the thesis still holds.")

    if price > 0.9:
        parts.append("Price near max, limited upside remaining.")
    elif price < 0.1:
        parts.append("Price near floor, high risk/reward if the thesis is correct.")

    if not exit_sim.can_fill:
        parts.append(
            f"Book too thin to exit fully: only ${exit_sim.amount_filled:,.0f} of "
            f"${exit_sim.target_usd:,.0f} fillable."
        )
    elif not clean:
        parts.append(
            f"Exit liquidity is {tier.value}. Expect ~{exit_sim.slippage_percent:.1f}% slippage on exit."
        )
    elif tier in (LiquidityTier.EXCELLENT, LiquidityTier.GOOD):
        parts.append("Good exit liquidity available.")

    return " ".join(parts) if parts else "No specific recommendations."


def summarize_portfolio(exits: Sequence[PositionExit]) -> PortfolioExitSummary:
    summary = PortfolioExitSummary(positions=list(exits))
    for ex in exits:
        summary.total_value += ex.position_value
        summary.total_cost_basis += ex.cost_basis
        summary.total_unrealized_pnl += ex.unrealized_pnl
        if ex.tier is not None and not ex.can_exit_cleanly:
            summary.risky_positions += 1
    summary.recommendation = portfolio_recommendation(summary)
    return summary


def portfolio_recommendation(summary: PortfolioExitSummary) -> str:
    if not summary.positions:
        return "No positions to analyze."

    pct = summary.total_unrealized_pnl_percent
    parts: list[str] = []
    if pct > 30:
        parts.append(f"Portfolio up {pct:.1f}% overall.")
    elif pct < -20:
        parts.append(f"Portfolio down {abs(pct):.1f}%. Review positions carefully.")
    else:
        parts.append(f"Portfolio {'up' if pct >= 0 else 'down'} {abs(pct):.1f}%.")

    if summary.risky_positions:
        parts.append(
            f"{summary.risky_positions} of {len(summary.positions)} positions have poor exit liquidity."
        )

    yes_value = sum(e.position_value for e in summary.positions if e.position.outcome.upper() == "YES")
    no_value = sum(e.position_value for e in summary.positions if e.position.outcome.upper() == "NO")
    if yes_value + no_value > 0:
        yes_share = yes_value / (yes_value + no_value) * 100
        if yes_share > 80:
            parts.append("Portfolio heavily weighted to YES outcomes. Consider hedging.")
        elif yes_share < 20:
            parts.append("Portfolio heavily weighted to NO outcomes.")
    return " ".join(parts)
