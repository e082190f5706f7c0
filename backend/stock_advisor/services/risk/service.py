"""
Risk Assessment Service Implementation

Combines quote and company reference data into MarketData with
risk flags. Results are cached for 15 minutes per ticker.
"""

import asyncio
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from stock_advisor.core.config import settings
from stock_advisor.schemas.risk import MarketData, NewsSentimentResult
from stock_advisor.services.base import BaseService
from stock_advisor.services.cache.ttl_cache import TTLCache
from stock_advisor.services.data_ingestion.interface import MarketDataProvider
from stock_advisor.services.data_ingestion.finnhub_adapter import FinnhubProvider
from stock_advisor.services.risk.assessment import (
    assess_risk_flags,
    calculate_risk_score,
    intraday_volatility,
    score_headline_sentiment,
)

logger = logging.getLogger(__name__)

EARNINGS_LOOKAHEAD_DAYS = 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RiskService(BaseService[str, Optional[MarketData]]):
    """
    Risk Assessment Service.

    Like the analytics service, per-ticker failures are logged and
    returned as None rather than raised.
    """

    def __init__(
        self,
        provider: Optional[MarketDataProvider] = None,
        cache: Optional[TTLCache] = None,
        now: Callable[[], datetime] = _utcnow,
        batch_size: Optional[int] = None,
        batch_pause: Optional[float] = None,
    ):
        self.provider = provider or FinnhubProvider()
        self.cache = cache if cache is not None else TTLCache(
            ttl=settings.market_data_cache_ttl_seconds
        )
        # Earnings entries never expire; cleared with clear_cache()
        self.earnings_cache = TTLCache()
        self._now = now
        self.batch_size = batch_size or settings.batch_size
        self.batch_pause = settings.batch_pause_seconds if batch_pause is None else batch_pause

    @property
    def name(self) -> str:
        return "RiskService"

    async def execute(self, input_data: str) -> Optional[MarketData]:
        return await self.get_market_data(input_data)

    async def _get_earnings(self, ticker: str):
        cached = self.earnings_cache.get(ticker)
        if cached is not None:
            return cached

        try:
            today = self._now().date()
            earnings = await self.provider.get_earnings(
                ticker, today, today + timedelta(days=EARNINGS_LOOKAHEAD_DAYS)
            )
        except Exception as e:
            logger.error(f"Error fetching earnings for {ticker}: {e}")
            return None

        if earnings:
            self.earnings_cache.set(ticker, earnings)
        return earnings

    async def get_market_data(self, ticker: str) -> Optional[MarketData]:
        """Quote + reference data + risk flags for a ticker."""
        ticker = ticker.upper()

        cached = self.cache.get(ticker)
        if cached is not None:
            return cached

        try:
            quote, profile, metrics, earnings = await asyncio.gather(
                self.provider.get_quote(ticker),
                self.provider.get_company_profile(ticker),
                self.provider.get_basic_financials(ticker),
                self._get_earnings(ticker),
            )
        except Exception as e:
            logger.error(f"Error fetching market data for {ticker}: {e}")
            return None

        if quote is None:
            return None

        now = self._now()
        try:
            market_data = MarketData(
                ticker=ticker,
                current_price=quote.current_price,
                change_percent=quote.day_change_percent,
                volume=quote.volume,
                market_cap=profile.market_cap if profile else 0.0,
                pe_ratio=metrics.get("peBasicExclExtraTTM") or 0.0,
                earnings_date=earnings.earnings_date if earnings else None,
                volatility_30d=intraday_volatility(quote),
                share_float=profile.share_outstanding if profile else 0.0,
                sector=profile.sector if profile else "Unknown",
                last_updated=now,
            )
        except PydanticValidationError as e:
            logger.error(f"Invalid market data for {ticker}: {e}")
            return None

        flags = assess_risk_flags(market_data, earnings, now.date())
        market_data = market_data.model_copy(
            update={"risk_flags": flags, "risk_score": calculate_risk_score(flags)}
        )

        self.cache.set(ticker, market_data)
        return market_data

    async def get_batch_market_data(self, tickers: list[str]) -> dict[str, MarketData]:
        """
        Market data for many tickers in batches of `batch_size`.

        Batches run concurrently inside and pause between each other to
        stay under the provider's rate limit.
        """
        results: dict[str, MarketData] = {}
        tickers = [t.upper() for t in tickers]

        for i in range(0, len(tickers), self.batch_size):
            batch = tickers[i : i + self.batch_size]
            outcomes = await asyncio.gather(
                *(self.get_market_data(t) for t in batch),
                return_exceptions=True,
            )
            for ticker, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"Error fetching data for {ticker}: {outcome}")
                elif outcome is not None:
                    results[ticker] = outcome

            if i + self.batch_size < len(tickers) and self.batch_pause > 0:
                await asyncio.sleep(self.batch_pause)

        return results

    async def get_sector_exposure(self, tickers: list[str]) -> dict[str, int]:
        """Count of tickers per sector (tickers without data are skipped)."""
        market_data = await self.get_batch_market_data(tickers)
        return dict(Counter(md.sector for md in market_data.values()))

    async def get_news_sentiment(self, ticker: str, days: int = 7) -> NewsSentimentResult:
        ticker = ticker.upper()
        today = self._now().date()

        try:
            news = await self.provider.get_company_news(
                ticker, today - timedelta(days=days), today
            )
        except Exception as e:
            logger.error(f"Error fetching news sentiment for {ticker}: {e}")
            return NewsSentimentResult(ticker=ticker, sentiment=0.0, news_count=0)

        headlines = [item.headline for item in news]
        return NewsSentimentResult(
            ticker=ticker,
            sentiment=score_headline_sentiment(headlines),
            news_count=len(headlines),
        )

    def clear_cache(self) -> None:
        self.cache.clear()
        self.earnings_cache.clear()

    def get_cache_stats(self) -> dict[str, int]:
        return {"market_data": len(self.cache), "earnings": len(self.earnings_cache)}

    async def health_check(self) -> bool:
        return await self.provider.health_check()


# Singleton instance
_service_instance: Optional[RiskService] = None


def get_risk_service() -> RiskService:
    """Get or create risk service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = RiskService()
    return _service_instance
