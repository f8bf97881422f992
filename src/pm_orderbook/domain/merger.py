"""Synthetic order-book merger: one ranked ladder per outcome token.

Under the sum-to-one identity of a binary market, the complement token's
opposite side is liquidity for the primary token:

- complement ASK at q → primary BID at 1 - q  (selling the complement at q
  is an implicit buyer of the primary at 1 - q)
- complement BID at q → primary ASK at 1 - q  (a complement buyer at q is an
  implicit seller of the primary at 1 - q)

This is the only place that derivation happens; liquidity, slippage and
arbitrage all consume its output.
"""

import logging
import math
from collections.abc import Iterable

from src.pm_common.enums import LevelOrigin
from src.pm_common.precision import complement_price, is_tradable_price
from src.pm_orderbook.domain.models import (
    MergedOrderBook,
    OrderLevel,
    PriceLevel,
    RawOrderBook,
)

logger = logging.getLogger(__name__)


def derive_synthetic_level(level: PriceLevel) -> OrderLevel | None:
    """Map a complement level to the primary token; None if outside (0, 1)."""
    price = complement_price(level.price)
    if not is_tradable_price(price) or not math.isfinite(level.size) or level.size < 0:
        return None
    return OrderLevel(price=price, size=level.size, origin=LevelOrigin.SYNTHETIC)


def _direct_levels(levels: Iterable[PriceLevel]) -> list[OrderLevel]:
    out = []
    for lv in levels:
        if not is_tradable_price(lv.price) or not math.isfinite(lv.size) or lv.size < 0:
            logger.debug("Dropping invalid direct level price=%s size=%s", lv.price, lv.size)
            continue
        out.append(OrderLevel(price=lv.price, size=lv.size, origin=LevelOrigin.DIRECT))
    return out


def _synthetic_levels(levels: Iterable[PriceLevel]) -> list[OrderLevel]:
    out = []
    for lv in levels:
        derived = derive_synthetic_level(lv)
        if derived is None:
            logger.debug("Dropping synthetic level from complement price=%s", lv.price)
            continue
        out.append(derived)
    return out


def merge_order_book(
    primary: RawOrderBook, complement: RawOrderBook | None = None
) -> MergedOrderBook:
    """Merge direct levels of `primary` with synthetic levels from `complement`.

    A missing complement, or one that is the primary token itself, yields the
    direct-only book. Equal prices keep insertion order: direct before
    synthetic (sorted() is stable with reverse=True too).
    """
    bids = _direct_levels(primary.bids)
    asks = _direct_levels(primary.asks)

    complement_id = None
    if complement is not None and complement.token_id != primary.token_id:
        complement_id = complement.token_id
        bids.extend(_synthetic_levels(complement.asks))
        asks.extend(_synthetic_levels(complement.bids))

    return MergedOrderBook(
        token_id=primary.token_id,
        market_id=primary.market_id or (complement.market_id if complement else None),
        complement_token_id=complement_id,
        bids=sorted(bids, key=lambda lv: lv.price, reverse=True),
        asks=sorted(asks, key=lambda lv: lv.price),
    )


def merge_pair(
    book_a: RawOrderBook, book_b: RawOrderBook
) -> tuple[MergedOrderBook, MergedOrderBook]:
    """Merged views of both outcomes of one market."""
    return merge_order_book(book_a, book_b), merge_order_book(book_b, book_a)
