from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Upstream market data (Polymarket public endpoints, no auth)
    CLOB_API_URL: str = "https://clob.polymarket.com"
    GAMMA_API_URL: str = "https://gamma-api.polymarket.com"

    # Every single network fetch carries this timeout
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Scan orchestration: batches run sequentially, units within a batch concurrently
    SCAN_BATCH_SIZE: int = 5
    SCAN_MAX_MARKETS: int = 60
    BATCH_BOOKS_MAX_TOKENS: int = 20

    # Analytics thresholds
    ARBITRAGE_THRESHOLD: float = 0.995  # YES ask + NO ask must be strictly below this
    WIDE_SPREAD_THRESHOLD: float = 0.02
    SLIPPAGE_PROBE_SIZES_USD: list[float] = [1000.0, 5000.0, 10000.0]
    CLEAN_EXIT_SLIPPAGE_PERCENT: float = 2.0

    # App
    APP_NAME: str = "Prediction Market Analytics"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"


settings = Settings()
