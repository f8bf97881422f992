"""Pydantic schemas for pm_orderbook API responses.

Rounding happens here, never in the domain: prices to 4 decimals, USD to 2.
"""

from pydantic import BaseModel, Field

from src.pm_common.datetime_utils import utc_now_iso
from src.pm_common.enums import BookView
from src.pm_common.precision import round_price, round_usd, to_cents
from src.pm_orderbook.domain.models import MergedOrderBook, OrderLevel

# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


class OrderLevelOut(BaseModel):
    price: float
    size: float
    origin: str

    @classmethod
    def from_domain(cls, lv: OrderLevel) -> "OrderLevelOut":
        return cls(price=round_price(lv.price), size=lv.size, origin=lv.origin.value)


# ---------------------------------------------------------------------------
# Single-book view
# ---------------------------------------------------------------------------


class OrderBookViewResponse(BaseModel):
    market_id: str | None
    token_id: str
    complement_token_id: str | None
    view: str
    bids: list[OrderLevelOut]
    asks: list[OrderLevelOut]
    best_bid: float
    best_ask: float
    mid_price: float
    spread: float
    spread_cents: float
    crossed: bool
    note: str
    fetched_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_book(
        cls, book: MergedOrderBook, merged: bool, levels: int
    ) -> "OrderBookViewResponse":
        if merged and book.complement_token_id:
            note = "Direct orders plus synthetic liquidity derived from the complement token"
        elif merged:
            note = "Complement token unavailable; showing direct orders only"
        else:
            note = "Direct orders only; request merged=true for the combined view"
        return cls(
            market_id=book.market_id,
            token_id=book.token_id,
            complement_token_id=book.complement_token_id,
            view=(BookView.MERGED if merged else BookView.RAW).value,
            bids=[OrderLevelOut.from_domain(lv) for lv in book.bids[:levels]],
            asks=[OrderLevelOut.from_domain(lv) for lv in book.asks[:levels]],
            best_bid=round_price(book.best_bid),
            best_ask=round_price(book.best_ask),
            mid_price=round_price(book.mid_price),
            spread=round_price(book.spread),
            spread_cents=to_cents(book.spread),
            crossed=book.is_crossed,
            note=note,
        )


# ---------------------------------------------------------------------------
# Batch summaries
# ---------------------------------------------------------------------------


class BookSummaryOut(BaseModel):
    token_id: str
    available: bool
    best_bid: float
    best_ask: float
    midpoint: float
    spread: float
    bid_depth_usd: float
    ask_depth_usd: float
    crossed: bool = False

    @classmethod
    def from_book(cls, book: MergedOrderBook) -> "BookSummaryOut":
        return cls(
            token_id=book.token_id,
            available=True,
            best_bid=round_price(book.best_bid),
            best_ask=round_price(book.best_ask),
            midpoint=round_price(book.mid_price),
            spread=round_price(book.spread),
            bid_depth_usd=round_usd(sum(lv.value_usd for lv in book.bids)),
            ask_depth_usd=round_usd(sum(lv.value_usd for lv in book.asks)),
            crossed=book.is_crossed,
        )

    @classmethod
    def unavailable(cls, token_id: str) -> "BookSummaryOut":
        return cls(
            token_id=token_id, available=False, best_bid=0.0, best_ask=1.0,
            midpoint=0.5, spread=1.0, bid_depth_usd=0.0, ask_depth_usd=0.0,
        )


class BatchBookSummaryResponse(BaseModel):
    orderbooks: dict[str, BookSummaryOut]
    count: int
    failed: int
    fetched_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def build(
        cls, books: dict[str, BookSummaryOut], failed: int
    ) -> "BatchBookSummaryResponse":
        return cls(orderbooks=books, count=len(books), failed=failed)


class BatchBookRequest(BaseModel):
    token_ids: list[str]
