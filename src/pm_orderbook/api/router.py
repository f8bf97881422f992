"""pm_orderbook REST endpoints.

GET  /orderbooks/{token_id}    raw or merged (direct + synthetic) ladder
POST /orderbooks/batch         merged top-of-book summaries for many tokens
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_orderbook.application.schemas import BatchBookRequest
from src.pm_orderbook.application.service import OrderBookApplicationService
from src.pm_orderbook.domain.provider import MarketDataProvider
from src.pm_orderbook.infrastructure.clob_provider import get_market_data_provider

router = APIRouter(prefix="/orderbooks", tags=["orderbooks"])


@router.post("/batch")
async def get_batch_orderbooks(
    body: BatchBookRequest,
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
) -> ApiResponse:
    result = await OrderBookApplicationService(provider).get_batch_summaries(body.token_ids)
    return success_response(result.model_dump(), request)


@router.get("/{token_id}")
async def get_orderbook(
    token_id: str,
    request: Request,
    provider: Annotated[MarketDataProvider, Depends(get_market_data_provider)],
    merged: bool = Query(True, description="Include synthetic liquidity from the complement"),
    levels: int = Query(20, ge=1, le=200),
) -> ApiResponse:
    result = await OrderBookApplicationService(provider).get_order_book(token_id, merged, levels)
    return success_response(result.model_dump(), request)
