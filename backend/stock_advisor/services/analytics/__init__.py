"""
Market Analytics Service

CONTRACT:
    Input:  ticker + Timeframe
    Output: Optional[MarketAnalytics]

RESPONSIBILITIES:
    - Fetch quote and daily history for a ticker
    - Compute performance, volatility and volume statistics
    - Run the technical analysis layer (indicators, signals, trend, levels)
    - Cache composites per ticker/timeframe
    - Fan out batches without letting one ticker fail the rest
    - Compare 2-5 tickers side by side
"""

from stock_advisor.services.analytics.service import (
    BatchAnalyticsResult,
    MarketAnalyticsService,
    build_comparison_insights,
    format_analytics,
    get_market_analytics_service,
)

__all__ = [
    "BatchAnalyticsResult",
    "MarketAnalyticsService",
    "build_comparison_insights",
    "format_analytics",
    "get_market_analytics_service",
]
