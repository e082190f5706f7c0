"""
Historical Data Service Implementation

Fetches daily candle history and live quotes from the configured provider,
caching candle series per ticker/timeframe.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from stock_advisor.schemas.market import (
    HistoricalDataRequest,
    OHLCV,
    Quote,
    Timeframe,
    validate_series,
)
from stock_advisor.services.base import BaseService
from stock_advisor.services.cache.redis_client import CandleCache, get_candle_cache
from stock_advisor.services.data_ingestion.interface import MarketDataProvider
from stock_advisor.services.data_ingestion.finnhub_adapter import FinnhubProvider

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_start_date(timeframe: Timeframe, end: datetime) -> datetime:
    """Start of the look-back window for a timeframe."""
    return end - timedelta(days=timeframe.days)


class HistoricalDataService(BaseService[HistoricalDataRequest, list[OHLCV]]):
    """
    Historical Data Service.

    Failures are logged and surface as an empty series (history) or
    None (quote) so callers can treat the ticker as unavailable.
    """

    def __init__(
        self,
        provider: Optional[MarketDataProvider] = None,
        cache: Optional[CandleCache] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.provider = provider or FinnhubProvider()
        self.cache = cache or get_candle_cache()
        self._now = now

    @property
    def name(self) -> str:
        return "HistoricalDataService"

    async def execute(self, input_data: HistoricalDataRequest) -> list[OHLCV]:
        return await self.get_historical_data(input_data.ticker, input_data.timeframe)

    async def get_historical_data(
        self, ticker: str, timeframe: Timeframe = Timeframe.Y1
    ) -> list[OHLCV]:
        """Daily candles covering `timeframe`, oldest first."""
        ticker = ticker.upper()
        timeframe = Timeframe(timeframe)

        cached = await self.cache.get_candles(ticker, timeframe.value)
        if cached:
            logger.debug(f"Candle cache hit for {ticker}-{timeframe.value}")
            return cached

        end = self._now()
        start = get_start_date(timeframe, end)

        try:
            candles = await self.provider.get_candles(ticker, start, end)
            validate_series(candles, ticker)
        except Exception as e:
            logger.error(f"Error fetching historical data for {ticker}: {e}")
            return []

        if candles:
            await self.cache.set_candles(ticker, timeframe.value, candles)
        return candles

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        """
        Current quote for a ticker.

        Unlike history, provider errors propagate so the aggregator can
        record why the ticker failed.
        """
        return await self.provider.get_quote(ticker.upper())

    async def health_check(self) -> bool:
        return await self.provider.health_check()


# Singleton instance
_service_instance: Optional[HistoricalDataService] = None


def get_historical_data_service() -> HistoricalDataService:
    """Get or create historical data service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = HistoricalDataService()
    return _service_instance
