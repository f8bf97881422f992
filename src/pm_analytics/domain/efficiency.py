"""Market efficiency (vig / overround) for a binary market.

Works on the two outcome prices only, not on full books. A missing, zero or
non-finite price is replaced by 0.5 so one degenerate quote never aborts the
analysis of an otherwise valid market.
"""

import math

from src.pm_analytics.domain.models import EfficiencyReport
from src.pm_common.enums import EfficiencyRating

FALLBACK_PRICE = 0.5


def _usable(price: float | None) -> bool:
    return price is not None and math.isfinite(price) and 0 < price <= 1


def rate_vig(vig: float) -> EfficiencyRating:
    magnitude = abs(vig)
    if magnitude < 0.005:
        return EfficiencyRating.EXCELLENT
    if magnitude < 0.02:
        return EfficiencyRating.GOOD
    if magnitude < 0.05:
        return EfficiencyRating.FAIR
    if vig > 0:
        return EfficiencyRating.POOR
    # Outcomes sum below 1: structural mispricing
    return EfficiencyRating.EXPLOITABLE


def score_efficiency(price_a: float | None, price_b: float | None) -> EfficiencyReport:
    defaulted = (not _usable(price_a), not _usable(price_b))
    p1 = FALLBACK_PRICE if defaulted[0] else float(price_a)  # type: ignore[arg-type]
    p2 = FALLBACK_PRICE if defaulted[1] else float(price_b)  # type: ignore[arg-type]

    total = p1 + p2
    vig = total - 1
    return EfficiencyReport(
        outcome_prices=(p1, p2),
        sum_of_outcomes=total,
        vig=vig,
        true_probabilities=(p1 / total, p2 / total),
        rating=rate_vig(vig),
        defaulted=defaulted,
    )


def recommend(report: EfficiencyReport) -> str:
    vig = report.vig
    if vig < -0.01:
        return (
            f"Arbitrage signal: outcome prices sum to {report.sum_of_outcomes:.4f}. "
            "Buying every outcome costs less than the $1 payout."
        )
    if vig > 0.05:
        return f"High vig ({vig * 100:.1f}%). Spread is eating potential edge. Consider waiting for better prices."
    if vig > 0.02:
        return f"Moderate vig ({vig * 100:.1f}%). Account for this when sizing positions."
    return "Market is efficiently priced. Edge must come from superior information."
