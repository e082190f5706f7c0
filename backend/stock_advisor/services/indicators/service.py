"""
Technical Analysis Service Implementation

Calculates indicators, signals, trend and levels from OHLCV data.
Pure Python/NumPy calculations.
"""

import logging
from typing import Optional

from stock_advisor.core.config import settings
from stock_advisor.schemas.market import OHLCV
from stock_advisor.schemas.analytics import (
    BollingerBandsData,
    MACDData,
    MACDSignalMode,
    TechnicalIndicators,
    TradingSignal,
    TrendAnalysis,
)
from stock_advisor.services.base import InsufficientDataError
from stock_advisor.services.indicators.interface import TechnicalAnalysisServiceInterface
from stock_advisor.services.indicators.calculations import (
    OHLCVArrays,
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    atr,
)
from stock_advisor.services.indicators.signals import generate_signals
from stock_advisor.services.indicators import trend

logger = logging.getLogger(__name__)

MIN_INDICATOR_POINTS = 200
MIN_SIGNAL_POINTS = 50


class TechnicalAnalysisService(TechnicalAnalysisServiceInterface):
    """
    Technical Analysis Service.

    Minimum-data policies:
    - individual indicators degrade to neutral defaults on short input
    - the full indicator bundle refuses anything under 200 candles
    """

    def __init__(self, macd_signal_mode: Optional[MACDSignalMode] = None):
        self.macd_signal_mode = MACDSignalMode(
            macd_signal_mode or settings.macd_signal_mode
        )

    async def execute(self, input_data: list[OHLCV]) -> TechnicalIndicators:
        return self.calculate_technical_indicators(input_data)

    def calculate_technical_indicators(self, candles: list[OHLCV]) -> TechnicalIndicators:
        """Calculate the full indicator set at the last candle."""
        if len(candles) < MIN_INDICATOR_POINTS:
            raise InsufficientDataError(
                self.name,
                f"Insufficient data for technical analysis "
                f"(minimum {MIN_INDICATOR_POINTS} data points required)",
                {"points": len(candles), "required": MIN_INDICATOR_POINTS},
            )

        arrays = OHLCVArrays.from_candles(candles)
        closes = arrays.closes

        macd_line, signal_line, histogram = macd(
            closes, signal_mode=self.macd_signal_mode
        )
        upper, middle, lower = bollinger_bands(closes, 20, 2.0)

        return TechnicalIndicators(
            sma20=sma(closes, 20),
            sma50=sma(closes, 50),
            sma200=sma(closes, 200),
            ema12=ema(closes, 12),
            ema26=ema(closes, 26),
            rsi14=rsi(closes, 14),
            macd=MACDData(line=macd_line, signal=signal_line, histogram=histogram),
            bollinger_bands=BollingerBandsData(upper=upper, middle=middle, lower=lower),
            atr14=atr(arrays.highs, arrays.lows, closes, 14),
        )

    def generate_trading_signals(self, candles: list[OHLCV]) -> list[TradingSignal]:
        """
        Generate trading signals for the last candle.

        Under 50 candles yields no signals. Between 50 and 199 the indicator
        bundle rejects the series, which is logged and also yields no signals.
        """
        if len(candles) < MIN_SIGNAL_POINTS:
            return []

        try:
            indicators = self.calculate_technical_indicators(candles)
        except InsufficientDataError as e:
            logger.warning(f"Skipping signal generation: {e}")
            return []

        return generate_signals(indicators, candles[-1].close)

    def analyze_trend(self, candles: list[OHLCV]) -> TrendAnalysis:
        return trend.analyze_trend(candles)

    def find_support_levels(self, candles: list[OHLCV]) -> list[float]:
        return trend.find_support_levels(candles)

    def find_resistance_levels(self, candles: list[OHLCV]) -> list[float]:
        return trend.find_resistance_levels(candles)


# Singleton instance
_service_instance: Optional[TechnicalAnalysisService] = None


def get_technical_analysis_service() -> TechnicalAnalysisService:
    """Get or create technical analysis service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = TechnicalAnalysisService()
    return _service_instance
