"""Arbitrage and wide-spread rules applied to merged quotes.

True arbitrage: merged best ask(A) + merged best ask(B) < threshold, with the
threshold strictly below 1 to leave room for fees and rounding. Wide spread:
merged spread on outcome A above its own threshold, reported separately.
"""

from collections.abc import Iterable

from src.pm_arbitrage.domain.models import (
    ArbitrageOpportunity,
    MarketQuote,
    ScanResult,
    WideSpreadCandidate,
)
from src.pm_orderbook.domain.models import MergedOrderBook


def quote_from_books(
    market_id: str,
    question: str,
    merged_a: MergedOrderBook,
    merged_b: MergedOrderBook,
    liquidity: float = 0.0,
) -> MarketQuote:
    return MarketQuote(
        market_id=market_id,
        question=question,
        best_ask_a=merged_a.asks[0].price if merged_a.asks else None,
        best_bid_a=merged_a.bids[0].price if merged_a.bids else None,
        best_ask_b=merged_b.asks[0].price if merged_b.asks else None,
        liquidity=liquidity,
        crossed_a=merged_a.is_crossed,
    )


def detect_arbitrage(quote: MarketQuote, threshold: float) -> ArbitrageOpportunity | None:
    if quote.best_ask_a is None or quote.best_ask_b is None:
        return None
    if quote.best_ask_a + quote.best_ask_b >= threshold:
        return None
    return ArbitrageOpportunity(
        market_id=quote.market_id,
        question=quote.question,
        buy_yes_at=quote.best_ask_a,
        buy_no_at=quote.best_ask_b,
        liquidity=quote.liquidity,
    )


def detect_wide_spread(quote: MarketQuote, threshold: float) -> WideSpreadCandidate | None:
    if quote.best_ask_a is None or quote.best_bid_a is None:
        return None
    candidate = WideSpreadCandidate(
        market_id=quote.market_id,
        question=quote.question,
        best_bid=quote.best_bid_a,
        best_ask=quote.best_ask_a,
    )
    return candidate if candidate.spread > threshold else None


def evaluate_quotes(
    quotes: Iterable[MarketQuote],
    arbitrage_threshold: float,
    wide_spread_threshold: float,
) -> ScanResult:
    """Apply both rules and rank: edge descending, spread descending."""
    result = ScanResult(
        arbitrage_threshold=arbitrage_threshold,
        wide_spread_threshold=wide_spread_threshold,
    )
    for quote in quotes:
        if quote.best_ask_a is None or quote.best_ask_b is None:
            continue
        result.scanned_markets += 1

        opp = detect_arbitrage(quote, arbitrage_threshold)
        if opp is not None:
            result.opportunities.append(opp)

        if quote.best_bid_a is not None:
            result.total_spread += quote.best_ask_a - quote.best_bid_a
            result.spread_samples += 1
            wide = detect_wide_spread(quote, wide_spread_threshold)
            if wide is not None:
                result.wide_spreads.append(wide)

    result.opportunities.sort(key=lambda o: o.edge, reverse=True)
    result.wide_spreads.sort(key=lambda w: w.spread, reverse=True)
    return result
