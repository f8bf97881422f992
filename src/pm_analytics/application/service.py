"""AnalyticsApplicationService: liquidity, slippage, efficiency, position exits.

Composes the order-book service (fetch + merge) with the pure domain
calculators. Reference prices are best-effort: a failed price feed falls back
to the merged-book midpoint.
"""

import logging

from config.settings import settings
from src.pm_analytics.application.schemas import (
    EfficiencyResponse,
    LiquidityResponse,
    PositionsResponse,
    SlippageOut,
    SlippageResponse,
)
from src.pm_analytics.domain.efficiency import recommend as recommend_efficiency
from src.pm_analytics.domain.efficiency import score_efficiency
from src.pm_analytics.domain.liquidity import analyze_liquidity, reference_or_mid
from src.pm_analytics.domain.models import PositionExit, PositionInput
from src.pm_analytics.domain.positions import (
    evaluate_position,
    summarize_portfolio,
    unavailable_position,
)
from src.pm_analytics.domain.slippage import simulate_sell
from src.pm_common.batching import gather_all, run_in_batches
from src.pm_common.errors import AppError, InvalidAmountError, MissingIdentifierError
from src.pm_orderbook.application.service import OrderBookApplicationService
from src.pm_orderbook.domain.models import MergedOrderBook, OutcomeToken
from src.pm_orderbook.domain.provider import MarketDataProvider

logger = logging.getLogger(__name__)


class AnalyticsApplicationService:
    def __init__(self, provider: MarketDataProvider) -> None:
        self._provider = provider
        self._books = OrderBookApplicationService(provider)

    async def _price_feed(self, token_id: str) -> float | None:
        try:
            return await self._provider.fetch_reference_price(token_id)
        except AppError as exc:
            logger.info("Reference price unavailable for %s: %s", token_id, exc.message)
            return None

    async def _book_and_reference(
        self, token: OutcomeToken
    ) -> tuple[MergedOrderBook, float]:
        book, feed_price = await gather_all(
            self._books.load_merged_book(token),
            self._price_feed(token.token_id),
        )
        return book, reference_or_mid(book, feed_price)

    async def analyze_liquidity(
        self,
        token_id: str | None,
        market_id: str | None,
        depth_window_pct: float | None = None,
    ) -> LiquidityResponse:
        token = await self._books.resolve_token(token_id, market_id)
        book, reference = await self._book_and_reference(token)
        report = analyze_liquidity(
            book,
            reference,
            probe_sizes_usd=settings.SLIPPAGE_PROBE_SIZES_USD,
            depth_window_pct=depth_window_pct,
        )
        logger.info(
            "Liquidity %s: tier=%s spread=%.4f synthetic=%s",
            token.token_id, report.tier.value, report.spread, report.has_synthetic,
        )
        return LiquidityResponse.from_domain(report)

    async def simulate_slippage(
        self, token_id: str | None, market_id: str | None, amount_usd: float
    ) -> SlippageResponse:
        if amount_usd <= 0:
            raise InvalidAmountError(amount_usd)
        token = await self._books.resolve_token(token_id, market_id)
        book, reference = await self._book_and_reference(token)
        result = simulate_sell(book.bids, amount_usd, reference)
        return SlippageResponse(
            token_id=book.token_id,
            market_id=book.market_id,
            reference_price=round(reference, 4),
            simulation=SlippageOut.from_domain(result),
        )

    async def check_efficiency(
        self, market_id: str | None, token_id: str | None = None
    ) -> EfficiencyResponse:
        if not market_id:
            if not token_id:
                raise MissingIdentifierError("Either market_id or token_id is required")
            market_id = (await self._provider.fetch_order_book(token_id)).market_id
            if not market_id:
                raise MissingIdentifierError(f"Token {token_id} is not linked to a market")

        tokens = await self._provider.fetch_market_tokens(market_id)
        feed_a, feed_b = await gather_all(
            self._price_feed(tokens.token_a), self._price_feed(tokens.token_b)
        )
        listed_a, listed_b = tokens.outcome_prices
        if feed_a is None or feed_b is None:
            # Live feed incomplete: use the market's listed prices for both sides
            feed_a, feed_b = listed_a, listed_b
        report = score_efficiency(feed_a, feed_b)

        spread: float | None = None
        try:
            book = await self._books.load_merged_book(
                OutcomeToken(tokens.token_a, tokens.market_id, tokens.token_b)
            )
            if book.bids and book.asks:
                spread = book.spread
        except AppError as exc:
            logger.info("Spread info unavailable for %s: %s", market_id, exc.message)

        return EfficiencyResponse.from_domain(
            market=tokens.question,
            market_id=tokens.market_id,
            token_ids=(tokens.token_a, tokens.token_b),
            report=report,
            spread=spread,
            recommendation=recommend_efficiency(report),
        )

    async def analyze_positions(self, positions: list[PositionInput]) -> PositionsResponse:
        async def _evaluate(index: int) -> PositionExit:
            position = positions[index]
            token = OutcomeToken(token_id=position.token_id, market_id=position.market_id)
            book, reference = await self._book_and_reference(token)
            report = analyze_liquidity(
                book, reference, probe_sizes_usd=settings.SLIPPAGE_PROBE_SIZES_USD
            )
            value = position.shares * reference
            exit_sim = simulate_sell(book.bids, value, reference)
            return evaluate_position(
                position, reference, exit_sim, report.tier,
                settings.CLEAN_EXIT_SLIPPAGE_PERCENT,
            )

        outcome = await run_in_batches(
            list(range(len(positions))),
            _evaluate,
            batch_size=settings.SCAN_BATCH_SIZE,
            unit_timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
        exits: dict[int, PositionExit] = dict(outcome.succeeded)
        for idx in outcome.failed + outcome.skipped:
            exits[idx] = unavailable_position(positions[idx])
        summary = summarize_portfolio([exits[i] for i in range(len(positions))])
        return PositionsResponse.from_domain(summary)
