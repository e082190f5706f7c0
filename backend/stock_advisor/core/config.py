"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Stock Advisor Pro Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Redis (historical candle cache)
    redis_url: str = "redis://localhost:6379"

    # CORS
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Finnhub market data provider
    finnhub_api_key: Optional[str] = None
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    http_timeout_seconds: float = 10.0

    # Indicator Engine
    # "legacy" keeps the 0.2 * line MACD signal, "ema" uses a 9-period EMA
    macd_signal_mode: str = "legacy"

    # Cache TTLs (seconds, 0 = never expire)
    analytics_cache_ttl_seconds: int = 900
    historical_cache_ttl_seconds: int = 3600
    market_data_cache_ttl_seconds: int = 900

    # Batch limits
    max_batch_tickers: int = 10
    batch_size: int = 10
    batch_pause_seconds: float = 1.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
