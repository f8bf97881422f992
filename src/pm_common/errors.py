"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Request / identifiers
  3xxx: Market resolution
  6xxx: Market data provider
  9xxx: System

Only conditions the caller must see are modelled here. Missing complement
tokens, invalid price levels and empty books degrade into valid results and
never raise.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Request ---

class InvalidRequestError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1000, f"Validation error: {detail}", 422)


class MissingIdentifierError(AppError):
    def __init__(self, detail: str = "Either token_id or market_id is required") -> None:
        super().__init__(1001, detail, 422)


class BatchTooLargeError(AppError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(1002, f"Batch of {size} exceeds maximum of {limit}", 422)


class InvalidAmountError(AppError):
    def __init__(self, amount: float) -> None:
        super().__init__(1003, f"Amount must be positive, got {amount}", 422)


# --- 3xxx: Market ---

class MarketTokensNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Could not resolve outcome tokens for market: {market_id}", 404)


# --- 6xxx: Provider ---

class ProviderFetchError(AppError):
    def __init__(self, detail: str, code: int = 6001, http_status: int = 502) -> None:
        super().__init__(code, f"Market data provider error: {detail}", http_status)


class ProviderTimeoutError(ProviderFetchError):
    def __init__(self, endpoint: str, timeout_s: float) -> None:
        super().__init__(f"timeout after {timeout_s:g}s for {endpoint}", 6002, 504)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
