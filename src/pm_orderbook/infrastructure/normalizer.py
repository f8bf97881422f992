"""Provider payload normalization.

Upstream responses are loosely typed: numbers arrive as strings, list fields
sometimes arrive JSON-encoded (`"[\\"0.5\\", \\"0.5\\"]"`), and price feeds use
either `{token: {"BUY": "0.5"}}` or `{token: "0.5"}`. Everything is coerced
here so the domain only ever sees PriceLevel / float.
"""

import json
import logging
import math
from typing import Any

from src.pm_common.precision import is_tradable_price
from src.pm_orderbook.domain.models import MarketTokens, PriceLevel, RawOrderBook
from src.pm_orderbook.domain.provider import CandidateMarket

logger = logging.getLogger(__name__)


def parse_json_array(value: Any) -> list[Any]:
    """Return a list from a list or a JSON-encoded list; [] otherwise."""
    if not value:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            return []
        return parsed if isinstance(parsed, list) else []
    return []


def to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_levels(raw: Any) -> list[PriceLevel]:
    """Coerce [{price, size}, ...]; invalid levels are dropped silently."""
    levels: list[PriceLevel] = []
    if not isinstance(raw, list):
        return levels
    for item in raw:
        if not isinstance(item, dict):
            continue
        price = to_float(item.get("price"))
        size = to_float(item.get("size"))
        if price is None or size is None:
            continue
        if not is_tradable_price(price) or not math.isfinite(size) or size < 0:
            logger.debug("Invalid price level dropped: price=%s size=%s", price, size)
            continue
        levels.append(PriceLevel(price=price, size=size))
    return levels


def parse_order_book(token_id: str, payload: Any) -> RawOrderBook:
    if not isinstance(payload, dict):
        raise ValueError("order book payload is not an object")
    return RawOrderBook(
        token_id=str(payload.get("asset_id") or token_id),
        market_id=payload.get("market") or None,
        bids=parse_levels(payload.get("bids") or []),
        asks=parse_levels(payload.get("asks") or []),
    )


def parse_market_tokens(market_id: str, payload: Any) -> MarketTokens | None:
    """CLOB /markets/{condition_id} → MarketTokens; None if fewer than 2 tokens."""
    if not isinstance(payload, dict):
        return None
    tokens = [t for t in payload.get("tokens") or [] if isinstance(t, dict) and t.get("token_id")]
    if len(tokens) < 2:
        return None
    return MarketTokens(
        market_id=str(payload.get("condition_id") or market_id),
        token_a=str(tokens[0]["token_id"]),
        token_b=str(tokens[1]["token_id"]),
        question=payload.get("question") or "",
        outcome_prices=(to_float(tokens[0].get("price")), to_float(tokens[1].get("price"))),
    )


def parse_reference_price(payload: Any, token_id: str, side: str) -> float | None:
    if not isinstance(payload, dict):
        return None
    entry = payload.get(token_id)
    if isinstance(entry, dict):
        entry = entry.get(side)
    price = to_float(entry)
    if price is None or not is_tradable_price(price):
        return None
    return price


def parse_candidate_markets(events: Any) -> list[CandidateMarket]:
    """Flatten Gamma events into binary candidates, skipping settled markets."""
    candidates: list[CandidateMarket] = []
    if not isinstance(events, list):
        return candidates
    for event in events:
        if not isinstance(event, dict):
            continue
        for market in event.get("markets") or []:
            if not isinstance(market, dict):
                continue
            token_ids = parse_json_array(market.get("clobTokenIds"))
            prices = parse_json_array(market.get("outcomePrices"))
            if len(token_ids) < 2 or len(prices) < 2:
                continue
            first_price = to_float(prices[0]) or 0.0
            if not is_tradable_price(first_price):
                continue
            candidates.append(
                CandidateMarket(
                    market_id=str(market.get("conditionId") or market.get("id") or ""),
                    question=market.get("question") or event.get("title") or "",
                    token_a=str(token_ids[0]),
                    token_b=str(token_ids[1]),
                    liquidity=to_float(market.get("liquidity") or event.get("liquidity")) or 0.0,
                )
            )
    return candidates
