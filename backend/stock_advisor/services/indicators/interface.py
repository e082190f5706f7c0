"""
Technical Analysis Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from stock_advisor.services.base import BaseService
from stock_advisor.schemas.market import OHLCV
from stock_advisor.schemas.analytics import (
    TechnicalIndicators,
    TradingSignal,
    TrendAnalysis,
)


class TechnicalAnalysisServiceInterface(BaseService[list[OHLCV], TechnicalIndicators]):
    """
    Technical Analysis Service Contract.

    INPUT: list[OHLCV]
        - Chronologically ascending daily candles

    OUTPUT: TechnicalIndicators
        - Indicator snapshot at the last candle

    The analysis methods are synchronous: they are pure arithmetic over
    in-memory arrays.
    """

    @property
    def name(self) -> str:
        return "TechnicalAnalysisService"

    @abstractmethod
    def calculate_technical_indicators(self, candles: list[OHLCV]) -> TechnicalIndicators:
        """
        Calculate the full indicator set.

        Raises:
            InsufficientDataError: fewer than 200 candles
        """
        pass

    @abstractmethod
    def generate_trading_signals(self, candles: list[OHLCV]) -> list[TradingSignal]:
        """Generate BUY/SELL signals. Never raises for short input."""
        pass

    @abstractmethod
    def analyze_trend(self, candles: list[OHLCV]) -> TrendAnalysis:
        pass

    @abstractmethod
    def find_support_levels(self, candles: list[OHLCV]) -> list[float]:
        pass

    @abstractmethod
    def find_resistance_levels(self, candles: list[OHLCV]) -> list[float]:
        pass

    async def health_check(self) -> bool:
        """Pure computation, always healthy."""
        return True
