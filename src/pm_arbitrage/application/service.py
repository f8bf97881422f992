"""ArbitrageApplicationService: candidate discovery + scanner wiring."""

import logging

from config.settings import settings
from src.pm_arbitrage.application.schemas import ScanResponse
from src.pm_arbitrage.engine.scanner import ArbitrageScanner
from src.pm_common.errors import BatchTooLargeError
from src.pm_orderbook.domain.provider import CandidateMarket, MarketDataProvider

logger = logging.getLogger(__name__)


class ArbitrageApplicationService:
    def __init__(
        self, provider: MarketDataProvider, scanner: ArbitrageScanner | None = None
    ) -> None:
        self._provider = provider
        self._scanner = scanner or ArbitrageScanner(
            provider,
            arbitrage_threshold=settings.ARBITRAGE_THRESHOLD,
            wide_spread_threshold=settings.WIDE_SPREAD_THRESHOLD,
            batch_size=settings.SCAN_BATCH_SIZE,
            fetch_timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )

    async def scan_top_markets(
        self, limit: int, category: str | None, deadline_seconds: float | None
    ) -> ScanResponse:
        """Discover the most liquid open markets, then scan them.

        Discovery failure propagates: without candidates there is nothing to
        return, partial or otherwise.
        """
        candidates = await self._provider.list_candidate_markets(limit, category)
        candidates = candidates[: settings.SCAN_MAX_MARKETS]
        logger.info("Arbitrage discovery: %d candidates (limit=%d category=%s)",
                    len(candidates), limit, category)
        result = await self._scanner.scan(candidates, deadline_seconds=deadline_seconds)
        return ScanResponse.from_domain(result, candidates=len(candidates))

    async def scan_markets(
        self, market_ids: list[str], deadline_seconds: float | None
    ) -> ScanResponse:
        unique = list(dict.fromkeys(market_ids))
        if len(unique) > settings.SCAN_MAX_MARKETS:
            raise BatchTooLargeError(len(unique), settings.SCAN_MAX_MARKETS)
        candidates = [CandidateMarket(market_id=mid) for mid in unique]
        result = await self._scanner.scan(candidates, deadline_seconds=deadline_seconds)
        return ScanResponse.from_domain(result, candidates=len(candidates))
