"""Liquidity analysis over a merged order book.

Tier thresholds, evaluated top-down (first match wins):

| Tier      | Condition                                  |
|-----------|--------------------------------------------|
| excellent | slippage($5k) < 2%  and spread < 0.02      |
| good      | slippage($5k) < 5%  and spread < 0.03      |
| moderate  | slippage($5k) < 10% and spread < 0.05      |
| poor      | slippage($1k) < 20%                        |
| illiquid  | otherwise                                  |

An empty book is not an error: best bid 0, best ask 1, zero depth, and the
slippage probes classify it as illiquid.
"""

from collections.abc import Sequence

from src.pm_analytics.domain.models import DepthSummary, LiquidityReport
from src.pm_analytics.domain.slippage import whale_cost
from src.pm_common.enums import LiquidityTier
from src.pm_common.precision import to_bps
from src.pm_orderbook.domain.models import MergedOrderBook, OrderLevel

SMALL_PROBE_USD = 1000.0
LARGE_PROBE_USD = 5000.0

_TIERS: tuple[tuple[LiquidityTier, float, float], ...] = (
    # (tier, max slippage on $5k, max spread)
    (LiquidityTier.EXCELLENT, 2.0, 0.02),
    (LiquidityTier.GOOD, 5.0, 0.03),
    (LiquidityTier.MODERATE, 10.0, 0.05),
)
_POOR_MAX_SMALL_SLIPPAGE = 20.0


def classify_liquidity(
    slippage_small: float, slippage_large: float, spread: float
) -> LiquidityTier:
    for tier, max_slippage, max_spread in _TIERS:
        if slippage_large < max_slippage and spread < max_spread:
            return tier
    if slippage_small < _POOR_MAX_SMALL_SLIPPAGE:
        return LiquidityTier.POOR
    return LiquidityTier.ILLIQUID


def side_depth(
    levels: Sequence[OrderLevel],
    reference_price: float | None = None,
    window_pct: float | None = None,
) -> float:
    """Σ size × price, optionally only within ±window_pct of reference."""
    if window_pct is None or reference_price is None or reference_price <= 0:
        return sum(lv.size * lv.price for lv in levels)
    lo = reference_price * (1 - window_pct / 100)
    hi = reference_price * (1 + window_pct / 100)
    return sum(lv.size * lv.price for lv in levels if lo <= lv.price <= hi)


def reference_or_mid(book: MergedOrderBook, reference_price: float | None) -> float:
    """Use the external price when available, else the merged-book midpoint."""
    if reference_price is not None and reference_price > 0:
        return reference_price
    return book.mid_price


def recommend(tier: LiquidityTier, spread: float, slip_small: float, slip_large: float) -> str:
    cents = spread * 100
    if tier == LiquidityTier.EXCELLENT:
        return f"Excellent liquidity. Spread: {cents:.0f}c. Exit $5k with ~{slip_large:.1f}% slippage."
    if tier == LiquidityTier.GOOD:
        return (
            f"Good liquidity. Spread: {cents:.0f}c. Exit $1k: ~{slip_small:.1f}% slippage, "
            f"$5k: ~{slip_large:.1f}%."
        )
    if tier == LiquidityTier.MODERATE:
        return f"Moderate liquidity. Consider limit orders. $1k exit: ~{slip_small:.1f}% slippage."
    return f"Low liquidity. Exit $1k would cost ~{slip_small:.1f}% in slippage. Use limit orders."


def analyze_liquidity(
    book: MergedOrderBook,
    reference_price: float,
    probe_sizes_usd: Sequence[float] = (1000.0, 5000.0, 10000.0),
    depth_window_pct: float | None = None,
) -> LiquidityReport:
    sizes = sorted({*probe_sizes_usd, SMALL_PROBE_USD, LARGE_PROBE_USD})
    probes = whale_cost(book.bids, reference_price, sizes)
    slip_small = probes[SMALL_PROBE_USD].slippage_percent
    slip_large = probes[LARGE_PROBE_USD].slippage_percent

    spread = book.spread
    tier = classify_liquidity(slip_small, slip_large, spread)

    depth = DepthSummary(
        bid_depth_usd=side_depth(book.bids, reference_price, depth_window_pct),
        ask_depth_usd=side_depth(book.asks, reference_price, depth_window_pct),
        window_pct=depth_window_pct,
    )

    return LiquidityReport(
        token_id=book.token_id,
        market_id=book.market_id,
        reference_price=reference_price,
        best_bid=book.best_bid,
        best_ask=book.best_ask,
        spread=spread,
        spread_bps=to_bps(spread, reference_price),
        depth=depth,
        whale_cost={size: probes[size] for size in probe_sizes_usd},
        tier=tier,
        crossed=book.is_crossed,
        has_synthetic=book.has_synthetic,
        recommendation=recommend(tier, spread, slip_small, slip_large),
    )
