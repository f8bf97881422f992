"""pm_arbitrage REST endpoints.

GET  /arbitrage/scan    discover liquid open markets and scan them
POST /arbitrage/scan    scan an explicit list of market (condition) ids
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.pm_arbitrage.application.schemas import ScanRequest
from src.pm_arbitrage.application.service import ArbitrageApplicationService
from src.pm_common.response import ApiResponse, success_response
from src.pm_orderbook.domain.provider import MarketDataProvider
from src.pm_orderbook.infrastructure.clob_provider import get_market_data_provider

router = APIRouter(prefix="/arbitrage", tags=["arbitrage"])


@router.get("/scan")
async def scan_top_markets(
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
    limit: int = Query(20, ge=1, le=100, description="Events to pull from discovery"),
    category: str | None = Query(None),
    deadline_seconds: float | None = Query(None, gt=0),
) -> ApiResponse:
    result = await ArbitrageApplicationService(provider).scan_top_markets(
        limit, category, deadline_seconds
    )
    return success_response(result.model_dump(), request)


@router.post("/scan")
async def scan_markets(
    body: ScanRequest,
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
) -> ApiResponse:
    result = await ArbitrageApplicationService(provider).scan_markets(
        body.market_ids, body.deadline_seconds
    )
    return success_response(result.model_dump(), request)
