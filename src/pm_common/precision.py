"""Probability-price helpers for binary outcome tokens.

Prices are floats on the 0-1 scale (0.55 = 55% implied probability). A price
of exactly 0 or 1 means the market is settled or degenerate, so tradable
prices live in the open interval (0, 1). Rounding here is presentation-only:
domain code computes in full precision and schemas round on the way out.
"""

PRICE_DECIMALS = 4
USD_DECIMALS = 2
SLIPPAGE_DECIMALS = 1
PERCENT_DECIMALS = 2


def is_tradable_price(price: float) -> bool:
    """True when price is strictly inside (0, 1)."""
    return 0.0 < price < 1.0


def complement_price(price: float) -> float:
    """Sum-to-one identity: the other outcome's price."""
    return 1.0 - price


def round_price(value: float) -> float:
    return round(value, PRICE_DECIMALS)


def round_usd(value: float) -> float:
    return round(value, USD_DECIMALS)


def round_slippage(value: float) -> float:
    return round(value, SLIPPAGE_DECIMALS)


def round_percent(value: float) -> float:
    return round(value, PERCENT_DECIMALS)


def to_cents(price: float) -> float:
    """0.035 -> 3.5 (one decimal), used for spread display."""
    return round(price * 100, 1)


def to_bps(value: float, reference: float) -> float:
    """value / reference in basis points; 0 when reference is not positive."""
    if reference <= 0:
        return 0.0
    return value / reference * 10000
