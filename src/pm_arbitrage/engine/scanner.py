"""ArbitrageScanner: batched, timeout-bounded fetch-and-merge over many markets.

Each market is an independent unit of work: resolve tokens if needed, fetch
both books concurrently, merge each against the other, reduce to a quote.
Units run `batch_size` at a time; batches run one after another to stay under
upstream rate limits. A failed or timed-out unit drops that market only.
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from src.pm_arbitrage.domain.detector import evaluate_quotes, quote_from_books
from src.pm_arbitrage.domain.models import MarketQuote, ScanResult
from src.pm_common.batching import gather_all, run_in_batches
from src.pm_orderbook.domain.merger import merge_pair
from src.pm_orderbook.domain.provider import CandidateMarket, MarketDataProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ArbitrageScanner:
    def __init__(
        self,
        provider: MarketDataProvider,
        arbitrage_threshold: float,
        wide_spread_threshold: float,
        batch_size: int = 5,
        fetch_timeout: float = 15.0,
    ) -> None:
        if not 0 < arbitrage_threshold < 1:
            raise ValueError(f"arbitrage_threshold must be in (0, 1), got {arbitrage_threshold}")
        self._provider = provider
        self.arbitrage_threshold = arbitrage_threshold
        self.wide_spread_threshold = wide_spread_threshold
        self.batch_size = batch_size
        self.fetch_timeout = fetch_timeout

    async def _fetch(self, coro: Awaitable[T]) -> T:
        # Per-fetch timeout, independent of the unit-level budget
        return await asyncio.wait_for(coro, timeout=self.fetch_timeout)

    async def quote_market(self, candidate: CandidateMarket) -> MarketQuote:
        token_a, token_b = candidate.token_a, candidate.token_b
        question = candidate.question
        if not token_a or not token_b:
            tokens = await self._fetch(self._provider.fetch_market_tokens(candidate.market_id))
            token_a, token_b = tokens.token_a, tokens.token_b
            question = question or tokens.question

        book_a, book_b = await gather_all(
            self._fetch(self._provider.fetch_order_book(token_a)),
            self._fetch(self._provider.fetch_order_book(token_b)),
        )
        merged_a, merged_b = merge_pair(book_a, book_b)
        return quote_from_books(
            candidate.market_id, question, merged_a, merged_b, candidate.liquidity
        )

    async def scan(
        self,
        candidates: Sequence[CandidateMarket],
        deadline_seconds: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ScanResult:
        """Scan candidates; on deadline or cancellation return what was collected."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + deadline_seconds if deadline_seconds else None

        # Unit budget: token resolution plus one concurrent pair of book fetches
        unit_timeout = self.fetch_timeout * 2
        outcome = await run_in_batches(
            candidates,
            self.quote_market,
            batch_size=self.batch_size,
            unit_timeout=unit_timeout,
            deadline=deadline,
            cancel_event=cancel_event,
        )

        result = evaluate_quotes(
            (quote for _, quote in outcome.succeeded),
            self.arbitrage_threshold,
            self.wide_spread_threshold,
        )
        result.failed_markets = len(outcome.failed)
        result.skipped_markets = len(outcome.skipped)
        result.partial = outcome.partial

        logger.info(
            "Scan done: candidates=%d scanned=%d failed=%d skipped=%d arbs=%d wide=%d partial=%s",
            len(candidates), result.scanned_markets, result.failed_markets,
            result.skipped_markets, len(result.opportunities), len(result.wide_spreads),
            result.partial,
        )
        return result
