"""
Stock Advisor Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from stock_advisor.schemas.market import (
    HistoricalDataRequest,
    Timeframe,
    OHLCV,
    Quote,
    CompanyProfile,
    EarningsEvent,
    NewsHeadline,
)
from stock_advisor.schemas.analytics import (
    TechnicalIndicators,
    TradingSignal,
    TrendAnalysis,
    PricePerformance,
    VolatilityMetrics,
    VolumeAnalysis,
    MarketAnalytics,
    BatchAnalyticsResponse,
)
from stock_advisor.schemas.risk import (
    MarketData,
    RiskFlag,
    NewsSentimentResult,
)

__all__ = [
    # Market
    "HistoricalDataRequest",
    "Timeframe",
    "OHLCV",
    "Quote",
    "CompanyProfile",
    "EarningsEvent",
    "NewsHeadline",
    # Analytics
    "TechnicalIndicators",
    "TradingSignal",
    "TrendAnalysis",
    "PricePerformance",
    "VolatilityMetrics",
    "VolumeAnalysis",
    "MarketAnalytics",
    "BatchAnalyticsResponse",
    # Risk
    "MarketData",
    "RiskFlag",
    "NewsSentimentResult",
]
