"""pm_analytics REST endpoints.

GET  /analytics/liquidity    spread, depth, whale cost, liquidity tier
GET  /analytics/slippage     sell-side slippage for one notional
GET  /analytics/efficiency   vig / overround and de-vigged probabilities
POST /analytics/positions    exit cost for held positions
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.pm_analytics.application.schemas import PositionsRequest
from src.pm_analytics.application.service import AnalyticsApplicationService
from src.pm_common.response import ApiResponse, success_response
from src.pm_orderbook.domain.provider import MarketDataProvider
from src.pm_orderbook.infrastructure.clob_provider import get_market_data_provider

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/liquidity")
async def analyze_liquidity(
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
    token_id: str | None = Query(None),
    market_id: str | None = Query(None, description="Condition id; uses its first outcome"),
    depth_window_pct: float | None = Query(None, gt=0, le=100),
) -> ApiResponse:
    result = await AnalyticsApplicationService(provider).analyze_liquidity(
        token_id, market_id, depth_window_pct
    )
    return success_response(result.model_dump(), request)


@router.get("/slippage")
async def simulate_slippage(
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
    amount_usd: float = Query(..., description="USD notional to sell"),
    token_id: str | None = Query(None),
    market_id: str | None = Query(None),
) -> ApiResponse:
    result = await AnalyticsApplicationService(provider).simulate_slippage(
        token_id, market_id, amount_usd
    )
    return success_response(result.model_dump(), request)


@router.get("/efficiency")
async def check_efficiency(
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
    market_id: str | None = Query(None),
    token_id: str | None = Query(None),
) -> ApiResponse:
    result = await AnalyticsApplicationService(provider).check_efficiency(market_id, token_id)
    return success_response(result.model_dump(), request)


@router.post("/positions")
async def analyze_positions(
    body: PositionsRequest,
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
) -> ApiResponse:
    result = await AnalyticsApplicationService(provider).analyze_positions(
        [p.to_domain() for p in body.positions]
    )
    return success_response(result.model_dump(), request)
