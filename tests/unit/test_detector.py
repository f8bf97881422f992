"""Unit tests for arbitrage and wide-spread detection."""

import pytest

from src.pm_arbitrage.domain.detector import (
    detect_arbitrage,
    detect_wide_spread,
    evaluate_quotes,
    quote_from_books,
)
from src.pm_arbitrage.domain.models import MarketQuote
from src.pm_orderbook.domain.models import MergedOrderBook, OrderLevel


def _quote(ask_a, ask_b, bid_a=None, market_id: str = "MKT-1") -> MarketQuote:
    return MarketQuote(
        market_id=market_id, question="Q?", best_ask_a=ask_a, best_bid_a=bid_a, best_ask_b=ask_b
    )


class TestDetectArbitrage:
    def test_below_threshold(self) -> None:
        opp = detect_arbitrage(_quote(0.48, 0.50), threshold=0.995)

        assert opp is not None
        assert opp.total_cost == pytest.approx(0.98)
        assert opp.edge == pytest.approx(0.02)

    def test_at_threshold_is_not_arbitrage(self) -> None:
        assert detect_arbitrage(_quote(0.5, 0.5), threshold=1.0) is None

    def test_overround_is_not_arbitrage(self) -> None:
        assert detect_arbitrage(_quote(0.52, 0.51), threshold=0.995) is None

    def test_missing_side(self) -> None:
        assert detect_arbitrage(_quote(None, 0.4), threshold=0.995) is None


class TestDetectWideSpread:
    def test_wide(self) -> None:
        w = detect_wide_spread(_quote(0.60, 0.45, bid_a=0.50), threshold=0.02)
        assert w is not None
        assert w.spread == pytest.approx(0.10)
        assert w.mid_price == pytest.approx(0.55)

    def test_tight(self) -> None:
        assert detect_wide_spread(_quote(0.51, 0.5, bid_a=0.50), threshold=0.02) is None


class TestQuoteFromBooks:
    def test_reads_merged_top_of_book(self) -> None:
        a = MergedOrderBook("A", bids=[OrderLevel(0.49, 1)], asks=[OrderLevel(0.52, 1)])
        b = MergedOrderBook("B", asks=[OrderLevel(0.51, 1)])

        q = quote_from_books("MKT-1", "Q?", a, b, liquidity=1000)

        assert (q.best_ask_a, q.best_bid_a, q.best_ask_b) == (0.52, 0.49, 0.51)
        assert q.liquidity == 1000

    def test_empty_sides_are_none(self) -> None:
        q = quote_from_books("MKT-1", "Q?", MergedOrderBook("A"), MergedOrderBook("B"))
        assert q.best_ask_a is None
        assert q.best_ask_b is None


class TestEvaluateQuotes:
    def test_ranked_by_edge_and_spread(self) -> None:
        quotes = [
            _quote(0.48, 0.50, bid_a=0.40, market_id="small-edge"),
            _quote(0.40, 0.50, bid_a=0.39, market_id="big-edge"),
            _quote(0.52, 0.51, bid_a=0.45, market_id="no-arb"),
        ]

        result = evaluate_quotes(quotes, 0.995, 0.02)

        assert [o.market_id for o in result.opportunities] == ["big-edge", "small-edge"]
        assert [w.market_id for w in result.wide_spreads] == ["small-edge", "no-arb"]
        assert result.scanned_markets == 3
        assert result.average_spread == pytest.approx((0.08 + 0.01 + 0.07) / 3)

    def test_one_sided_quotes_not_scanned(self) -> None:
        result = evaluate_quotes([_quote(None, 0.5)], 0.995, 0.02)
        assert result.scanned_markets == 0
        assert result.average_spread == 0.0
