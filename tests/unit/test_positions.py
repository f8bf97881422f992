"""Unit tests for position exit analysis."""

import pytest

from src.pm_analytics.domain.models import PositionInput, SlippageResult
from src.pm_analytics.domain.positions import (
    evaluate_position,
    summarize_portfolio,
    unavailable_position,
)
from src.pm_common.enums import LiquidityTier


def _sim(slippage: float = 0.5, can_fill: bool = True, target: float = 600.0) -> SlippageResult:
    return SlippageResult(
        target_usd=target, amount_filled=target if can_fill else target / 2,
        shares_filled=1000, avg_price=0.6, worst_price=0.59,
        slippage_percent=slippage, can_fill=can_fill,
    )


def _pos(outcome: str = "YES", shares: float = 1000, entry: float = 0.40) -> PositionInput:
    return PositionInput(token_id="YES-1", outcome=outcome, shares=shares, avg_entry_price=entry)


class TestEvaluatePosition:
    def test_pnl(self) -> None:
        ex = evaluate_position(_pos(), 0.60, _sim(), LiquidityTier.GOOD, 2.0)

        assert ex.position_value == pytest.approx(600)
        assert ex.cost_basis == pytest.approx(400)
        assert ex.unrealized_pnl == pytest.approx(200)
        assert ex.unrealized_pnl_percent == pytest.approx(50)
        assert ex.can_exit_cleanly is True
        assert "Good exit liquidity" in ex.recommendation

    def test_high_slippage_not_clean(self) -> None:
        ex = evaluate_position(_pos(), 0.60, _sim(slippage=4.0), LiquidityTier.MODERATE, 2.0)

        assert ex.can_exit_cleanly is False
        assert "moderate" in ex.recommendation

    def test_unfillable_not_clean(self) -> None:
        ex = evaluate_position(_pos(), 0.60, _sim(can_fill=False), LiquidityTier.POOR, 2.0)

        assert ex.can_exit_cleanly is False
        assert "too thin" in ex.recommendation

    def test_zero_cost_basis(self) -> None:
        ex = evaluate_position(_pos(entry=0.0), 0.60, _sim(), LiquidityTier.GOOD, 2.0)
        assert ex.unrealized_pnl_percent == 0.0


class TestUnavailablePosition:
    def test_values_at_entry(self) -> None:
        ex = unavailable_position(_pos())

        assert ex.position_value == pytest.approx(400)
        assert ex.unrealized_pnl == 0.0
        assert ex.exit is None
        assert ex.tier is None


class TestSummarizePortfolio:
    def test_totals_and_risky_count(self) -> None:
        clean = evaluate_position(_pos(), 0.60, _sim(), LiquidityTier.GOOD, 2.0)
        risky = evaluate_position(
            _pos(outcome="NO", shares=500, entry=0.5), 0.40, _sim(slippage=9),
            LiquidityTier.POOR, 2.0,
        )
        missing = unavailable_position(_pos())

        summary = summarize_portfolio([clean, risky, missing])

        assert summary.total_value == pytest.approx(600 + 200 + 400)
        assert summary.total_cost_basis == pytest.approx(400 + 250 + 400)
        assert summary.total_unrealized_pnl == pytest.approx(200 - 50)
        # Unavailable positions are not counted as risky
        assert summary.risky_positions == 1
        assert "1 of 3 positions" in summary.recommendation

    def test_concentration_note(self) -> None:
        ex = evaluate_position(_pos(), 0.60, _sim(), LiquidityTier.GOOD, 2.0)
        summary = summarize_portfolio([ex])
        assert "heavily weighted to YES" in summary.recommendation

    def test_empty(self) -> None:
        summary = summarize_portfolio([])
        assert summary.total_unrealized_pnl_percent == 0.0
        assert summary.recommendation == "No positions to analyze."
