"""
Market Analytics Service Implementation

Orchestrates history + quote fetching and the technical analysis layer
into one MarketAnalytics record per ticker.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from stock_advisor.core.config import settings
from stock_advisor.schemas.analytics import (
    AnalyticsFormat,
    BatchError,
    ComparisonInsights,
    ComparisonResult,
    ComparisonRow,
    MarketAnalytics,
    PriceChange,
    TrendDirection,
)
from stock_advisor.schemas.market import HistoricalDataRequest, Timeframe
from stock_advisor.services.base import BaseService, ValidationError
from stock_advisor.services.cache.ttl_cache import TTLCache
from stock_advisor.services.data_ingestion.service import (
    HistoricalDataService,
    get_historical_data_service,
)
from stock_advisor.services.indicators.service import (
    TechnicalAnalysisService,
    get_technical_analysis_service,
)
from stock_advisor.services.analytics.metrics import (
    calculate_performance,
    calculate_volatility_metrics,
    calculate_volume_analysis,
)

logger = logging.getLogger(__name__)

MIN_COMPARE_TICKERS = 2
MAX_COMPARE_TICKERS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BatchAnalyticsResult:
    """Per-ticker outcome of a batch run. Order follows the request."""

    results: dict[str, MarketAnalytics] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


class MarketAnalyticsService(BaseService[HistoricalDataRequest, Optional[MarketAnalytics]]):
    """
    Market Analytics Service.

    Returns None instead of raising when analytics cannot be produced
    for a ticker (provider failure, unknown ticker, too little history).
    """

    def __init__(
        self,
        data_service: Optional[HistoricalDataService] = None,
        technical_service: Optional[TechnicalAnalysisService] = None,
        cache: Optional[TTLCache] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.data_service = data_service or get_historical_data_service()
        self.technical_service = technical_service or get_technical_analysis_service()
        self.cache = cache if cache is not None else TTLCache(
            ttl=settings.analytics_cache_ttl_seconds
        )
        self._now = now

    @property
    def name(self) -> str:
        return "MarketAnalyticsService"

    async def execute(self, input_data: HistoricalDataRequest) -> Optional[MarketAnalytics]:
        return await self.get_market_analytics(input_data.ticker, input_data.timeframe)

    @staticmethod
    def cache_key(ticker: str, timeframe: Timeframe) -> str:
        return f"{ticker.upper()}-{Timeframe(timeframe).value}"

    async def get_market_analytics(
        self, ticker: str, timeframe: Timeframe = Timeframe.Y1
    ) -> Optional[MarketAnalytics]:
        """Composite analytics for one ticker, or None if unavailable."""
        ticker = ticker.upper()
        timeframe = Timeframe(timeframe)
        key = self.cache_key(ticker, timeframe)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Analytics cache hit for {key}")
            return cached

        try:
            quote, candles = await asyncio.gather(
                self.data_service.get_quote(ticker),
                self.data_service.get_historical_data(ticker, timeframe),
            )

            if quote is None or not candles:
                logger.info(f"No market data for {ticker} ({timeframe.value})")
                return None

            ta = self.technical_service
            analytics = MarketAnalytics(
                ticker=ticker,
                timeframe=timeframe.value,
                generated_at=self._now(),
                current_price=quote.current_price,
                price_change=PriceChange(
                    amount=quote.day_change,
                    percentage=quote.day_change_percent,
                ),
                performance=calculate_performance(candles, quote.current_price, self._now()),
                volatility=calculate_volatility_metrics(candles),
                volume=calculate_volume_analysis(candles),
                technicals=ta.calculate_technical_indicators(candles),
                chart_data=candles,
                signals=ta.generate_trading_signals(candles),
                trend=ta.analyze_trend(candles),
                support=ta.find_support_levels(candles),
                resistance=ta.find_resistance_levels(candles),
            )
        except Exception as e:
            logger.error(f"Error building analytics for {ticker}: {e}")
            return None

        self.cache.set(key, analytics)
        return analytics

    async def get_batch_analytics(
        self, tickers: list[str], timeframe: Timeframe = Timeframe.Y1
    ) -> BatchAnalyticsResult:
        """
        Analytics for several tickers concurrently.

        A failing ticker lands in `errors`; it never fails the batch.
        """
        tickers = [t.upper() for t in tickers]
        outcomes = await asyncio.gather(
            *(self.get_market_analytics(t, timeframe) for t in tickers),
            return_exceptions=True,
        )

        batch = BatchAnalyticsResult()
        for ticker, outcome in zip(tickers, outcomes):
            if isinstance(outcome, BaseException):
                batch.errors[ticker] = str(outcome) or "Unknown error"
            elif outcome is None:
                batch.errors[ticker] = "No data available"
            else:
                batch.results[ticker] = outcome
        return batch

    async def get_comparison(
        self, tickers: list[str], timeframe: Timeframe = Timeframe.Y1
    ) -> ComparisonResult:
        """
        Side-by-side comparison of 2-5 tickers.

        Raises ValidationError (with a `code` detail) for too few or too many
        tickers. Tickers without analytics are reported in `errors`.
        """
        tickers = [t.upper() for t in tickers]
        if len(tickers) < MIN_COMPARE_TICKERS:
            raise ValidationError(
                self.name,
                f"Comparison requires at least {MIN_COMPARE_TICKERS} tickers",
                {"code": "INSUFFICIENT_TICKERS"},
            )
        if len(tickers) > MAX_COMPARE_TICKERS:
            raise ValidationError(
                self.name,
                f"Maximum {MAX_COMPARE_TICKERS} tickers allowed for comparison",
                {"code": "TOO_MANY_TICKERS"},
            )

        timeframe = Timeframe(timeframe)
        logger.info(f"Comparing stocks: {', '.join(tickers)}")
        batch = await self.get_batch_analytics(tickers, timeframe)

        rows = [comparison_row(batch.results[t]) for t in tickers if t in batch.results]
        return ComparisonResult(
            tickers=tickers,
            timeframe=timeframe.value,
            data=rows,
            insights=build_comparison_insights(rows),
            errors=[BatchError(ticker=t, error=msg) for t, msg in batch.errors.items()],
            last_updated=self._now(),
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> dict[str, int]:
        return {"analytics": len(self.cache)}

    async def health_check(self) -> bool:
        return await self.data_service.health_check()


# =============================================================================
# RESPONSE FORMATTING
# =============================================================================


def format_analytics(analytics: MarketAnalytics, fmt: AnalyticsFormat) -> dict:
    """Shape a composite record for one of the API's response formats."""
    data = analytics.model_dump(mode="json", by_alias=True)

    if fmt == AnalyticsFormat.SIMPLE:
        performance = data["performance"]
        return {
            "ticker": analytics.ticker,
            "current_price": analytics.current_price,
            "change": data["price_change"],
            "performance": {k: performance[k] for k in ("24h", "7d", "30d")},
            "trend": analytics.trend.direction.value,
            "signals": len(analytics.signals),
        }

    if fmt == AnalyticsFormat.TECHNICALS:
        technicals = data["technicals"]
        return {
            "ticker": analytics.ticker,
            "current_price": analytics.current_price,
            "technicals": {k: technicals[k] for k in ("sma20", "sma50", "rsi14")},
            "trend": data["trend"],
            "signals": data["signals"][:3],
        }

    if fmt == AnalyticsFormat.CHART:
        return {
            "ticker": analytics.ticker,
            "current_price": analytics.current_price,
            "chart_data": data["chart_data"],
            "technicals": data["technicals"],
        }

    data.pop("chart_data")
    return data



# =============================================================================
# COMPARISON
# =============================================================================

BEST_PERFORMER_WINDOWS = (("24h", "day"), ("7d", "week"), ("30d", "month"))


def comparison_row(analytics: MarketAnalytics) -> ComparisonRow:
    return ComparisonRow(
        ticker=analytics.ticker,
        current_price=analytics.current_price,
        performance=analytics.performance,
        volatility=analytics.volatility.current,
        rsi=analytics.technicals.rsi14,
        trend=analytics.trend.direction,
        signals=len(analytics.signals),
    )


def build_comparison_insights(rows: list[ComparisonRow]) -> Optional[ComparisonInsights]:
    """
    Best performers, volatility extremes, bullish count and mean RSI.

    Ties go to the ticker listed first.
    """
    if not rows:
        return None

    best_performer = {
        label: max(rows, key=lambda row, attr=attr: getattr(row.performance, attr))
        for label, attr in BEST_PERFORMER_WINDOWS
    }

    return ComparisonInsights(
        best_performer=best_performer,
        most_volatile=max(rows, key=lambda row: row.volatility),
        least_volatile=min(rows, key=lambda row: row.volatility),
        strongest_trend=sum(1 for row in rows if row.trend == TrendDirection.BULLISH),
        average_rsi=sum(row.rsi for row in rows) / len(rows),
    )


# Singleton instance
_service_instance: Optional[MarketAnalyticsService] = None


def get_market_analytics_service() -> MarketAnalyticsService:
    """Get or create market analytics service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = MarketAnalyticsService()
    return _service_instance
