"""OrderBookApplicationService: fetch + complement resolution + merge.

Single-market reads: a failure fetching the primary book propagates; anything
that only affects the complement degrades to a direct-only merged book.
"""

import logging

from config.settings import settings
from src.pm_common.batching import gather_all, run_in_batches
from src.pm_common.errors import (
    AppError,
    BatchTooLargeError,
    MissingIdentifierError,
)
from src.pm_orderbook.application.schemas import (
    BatchBookSummaryResponse,
    BookSummaryOut,
    OrderBookViewResponse,
)
from src.pm_orderbook.domain.merger import merge_order_book
from src.pm_orderbook.domain.models import MergedOrderBook, OutcomeToken, RawOrderBook
from src.pm_orderbook.domain.provider import MarketDataProvider

logger = logging.getLogger(__name__)


class OrderBookApplicationService:
    def __init__(self, provider: MarketDataProvider) -> None:
        self._provider = provider

    async def resolve_token(
        self, token_id: str | None, market_id: str | None
    ) -> OutcomeToken:
        """Pin down the primary token and, if a market id is given, its complement."""
        if not token_id and not market_id:
            raise MissingIdentifierError()
        if not market_id:
            return OutcomeToken(token_id=token_id)  # type: ignore[arg-type]
        tokens = await self._provider.fetch_market_tokens(market_id)
        primary = token_id or tokens.token_a
        return OutcomeToken(
            token_id=primary,
            market_id=tokens.market_id,
            complement_token_id=tokens.complement_of(primary),
        )

    async def _find_complement(self, primary: RawOrderBook) -> str | None:
        if not primary.market_id:
            return None
        try:
            tokens = await self._provider.fetch_market_tokens(primary.market_id)
        except AppError as exc:
            logger.info("Complement lookup failed for %s: %s", primary.token_id, exc.message)
            return None
        return tokens.complement_of(primary.token_id)

    async def _fetch_complement_book(self, complement_id: str) -> RawOrderBook | None:
        try:
            return await self._provider.fetch_order_book(complement_id)
        except AppError as exc:
            logger.info("Complement book %s unavailable: %s", complement_id, exc.message)
            return None

    async def load_merged_book(self, token: OutcomeToken) -> MergedOrderBook:
        """Primary book is required; complement is best-effort."""
        complement_id = token.complement_token_id
        if complement_id:
            primary, complement = await gather_all(
                self._provider.fetch_order_book(token.token_id),
                self._fetch_complement_book(complement_id),
            )
        else:
            primary = await self._provider.fetch_order_book(token.token_id)
            complement_id = await self._find_complement(primary)
            complement = (
                await self._fetch_complement_book(complement_id) if complement_id else None
            )

        if primary.market_id is None and token.market_id:
            primary.market_id = token.market_id
        if complement is None:
            logger.info("No complement data for %s; direct-only book", token.token_id)
        return merge_order_book(primary, complement)

    async def get_order_book(
        self, token_id: str, merged: bool, levels: int
    ) -> OrderBookViewResponse:
        if merged:
            book = await self.load_merged_book(OutcomeToken(token_id=token_id))
        else:
            book = merge_order_book(await self._provider.fetch_order_book(token_id))
        return OrderBookViewResponse.from_book(book, merged=merged, levels=levels)

    async def get_batch_summaries(self, token_ids: list[str]) -> BatchBookSummaryResponse:
        limit = settings.BATCH_BOOKS_MAX_TOKENS
        if not token_ids:
            raise MissingIdentifierError("token_ids must not be empty")
        if len(token_ids) > limit:
            raise BatchTooLargeError(len(token_ids), limit)

        unique = list(dict.fromkeys(token_ids))

        async def _load(tid: str) -> MergedOrderBook:
            return await self.load_merged_book(OutcomeToken(token_id=tid))

        outcome = await run_in_batches(
            unique,
            _load,
            batch_size=settings.SCAN_BATCH_SIZE,
            unit_timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
        books = {tid: BookSummaryOut.from_book(book) for tid, book in outcome.succeeded}
        for tid in outcome.failed + outcome.skipped:
            books[tid] = BookSummaryOut.unavailable(tid)
        return BatchBookSummaryResponse.build(
            {tid: books[tid] for tid in unique}, failed=len(outcome.failed)
        )
