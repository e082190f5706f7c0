"""
Technical Analysis Service

CONTRACT:
    Input:  list[OHLCV]
    Output: TechnicalIndicators, list[TradingSignal], TrendAnalysis, levels

RESPONSIBILITIES:
    - Calculate indicators (SMA, EMA, RSI, MACD, Bollinger Bands, ATR)
    - Generate BUY/SELL signals from indicator thresholds
    - Classify trend direction and duration
    - Detect support/resistance levels

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stock_advisor.services.indicators.interface import TechnicalAnalysisServiceInterface
from stock_advisor.services.indicators.service import (
    TechnicalAnalysisService,
    get_technical_analysis_service,
    MIN_INDICATOR_POINTS,
    MIN_SIGNAL_POINTS,
)

__all__ = [
    "TechnicalAnalysisServiceInterface",
    "TechnicalAnalysisService",
    "get_technical_analysis_service",
    "MIN_INDICATOR_POINTS",
    "MIN_SIGNAL_POINTS",
]
