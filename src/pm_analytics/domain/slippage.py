"""Sell-side slippage simulation over a merged bid ladder.

Walk bids best → worst, consuming min(remaining USD, level value) at each
level. No matching engine: the ladder is a read-only snapshot.
"""

from collections.abc import Sequence

from src.pm_analytics.domain.models import SlippageResult
from src.pm_orderbook.domain.models import OrderLevel


def simulate_sell(
    bids: Sequence[OrderLevel], target_usd: float, reference_price: float
) -> SlippageResult:
    """Estimate realized price for selling `target_usd` worth of shares.

    `bids` must already be sorted best (highest) first. Selling nothing fills
    trivially at the reference price.
    """
    if target_usd <= 0:
        return SlippageResult(
            target_usd=target_usd,
            amount_filled=0.0,
            shares_filled=0.0,
            avg_price=reference_price,
            worst_price=reference_price,
            slippage_percent=0.0,
            can_fill=True,
        )

    remaining = target_usd
    total_shares = 0.0
    worst_price = reference_price

    for level in bids:
        if remaining <= 0:
            break
        level_value = level.size * level.price
        fill_value = min(remaining, level_value)
        total_shares += fill_value / level.price
        remaining -= fill_value
        worst_price = level.price

    filled = target_usd - remaining
    avg_price = filled / total_shares if total_shares > 0 else 0.0

    if reference_price > 0:
        slippage = max(0.0, (reference_price - avg_price) / reference_price * 100)
    else:
        slippage = 100.0

    return SlippageResult(
        target_usd=target_usd,
        amount_filled=filled,
        shares_filled=total_shares,
        avg_price=avg_price,
        worst_price=worst_price,
        slippage_percent=slippage,
        can_fill=remaining <= 0,
    )


def whale_cost(
    bids: Sequence[OrderLevel], reference_price: float, sizes_usd: Sequence[float]
) -> dict[float, SlippageResult]:
    return {size: simulate_sell(bids, size, reference_price) for size in sizes_usd}
