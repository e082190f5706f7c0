"""
CONTRACT 2: Technical Analysis & Market Analytics

Input: list[OHLCV] (+ Quote for the composite record)
Output: TechnicalIndicators, TradingSignal, TrendAnalysis, MarketAnalytics

All records here are derived values. They are rebuilt on every request
and never mutated after construction.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, computed_field

from stock_advisor.schemas.market import OHLCV, Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class SignalType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    NEUTRAL = "NEUTRAL"


class TrendDirection(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class VolatilityRanking(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class VolumeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class MACDSignalMode(str, Enum):
    LEGACY = "legacy"  # signal = 0.2 * line
    EMA = "ema"  # signal = 9-period EMA of the MACD line


class AnalyticsFormat(str, Enum):
    SIMPLE = "simple"
    CHART = "chart"
    TECHNICALS = "technicals"
    DETAILED = "detailed"


# =============================================================================
# INDICATOR SET
# =============================================================================


class MACDData(BaseModel):
    """MACD indicator values."""

    line: float
    signal: float
    histogram: float


class BollingerBandsData(BaseModel):
    """Bollinger Bands values."""

    upper: float
    middle: float
    lower: float


class TechnicalIndicators(BaseModel):
    """Snapshot of every indicator at the last point of a series."""

    sma20: float
    sma50: float
    sma200: float
    ema12: float
    ema26: float
    rsi14: float = Field(..., ge=0, le=100)
    macd: MACDData
    bollinger_bands: BollingerBandsData
    atr14: float = Field(..., ge=0, description="Average True Range")


# =============================================================================
# SIGNALS & TREND
# =============================================================================


class TradingSignal(BaseModel):
    """Signal generated by a single indicator rule."""

    type: SignalType
    indicator: str
    strength: float = Field(..., ge=0, le=1)
    description: str
    expires: Optional[datetime] = None


class TrendAnalysis(BaseModel):
    """Directional trend over the most recent closes."""

    direction: TrendDirection
    strength: float = Field(..., ge=0, le=1)
    duration_days: int = Field(..., ge=0)

    @computed_field
    @property
    def duration(self) -> str:
        return f"{self.duration_days} days"


# =============================================================================
# MARKET ANALYTICS COMPONENTS
# =============================================================================


class PriceChange(BaseModel):
    """Change reported by the live quote."""

    amount: float
    percentage: float
    timeframe: str = "24h"


class PricePerformance(BaseModel):
    """Percentage change to the current price over several horizons."""

    one_hour: float = Field(default=0.0, alias="1h")
    day: float = Field(default=0.0, alias="24h")
    week: float = Field(default=0.0, alias="7d")
    month: float = Field(default=0.0, alias="30d")
    ytd: float = Field(default=0.0, alias="ytd")
    year: float = Field(default=0.0, alias="1y")

    class Config:
        populate_by_name = True


class VolatilityMetrics(BaseModel):
    """Annualized volatility of daily returns."""

    current: float = Field(..., ge=0)
    average30d: float = Field(..., ge=0)
    percentile: int = Field(..., ge=0, le=100)
    ranking: VolatilityRanking


class VolumeAnalysis(BaseModel):
    """Current volume against its recent average."""

    current: int = Field(..., ge=0)
    average20d: float = Field(..., ge=0)
    ratio: float = Field(..., ge=0)
    trend: VolumeTrend


# =============================================================================
# OUTPUT: MarketAnalytics (Complete Response)
# =============================================================================


class MarketAnalytics(BaseModel):
    """
    Composite analytics record for one ticker.
    Returned by: Market Analytics Service
    Consumed by: analytics endpoints (single + batch)
    """

    ticker: str
    timeframe: str
    generated_at: datetime
    current_price: float
    price_change: PriceChange
    performance: PricePerformance
    volatility: VolatilityMetrics
    volume: VolumeAnalysis
    technicals: TechnicalIndicators
    chart_data: list[OHLCV]
    signals: list[TradingSignal]
    trend: TrendAnalysis
    support: list[float]
    resistance: list[float]


# =============================================================================
# BATCH RESPONSE
# =============================================================================


class BatchSummary(BaseModel):
    requested: int
    successful: int
    failed: int


class BatchError(BaseModel):
    ticker: str
    error: str


class BatchAnalyticsResponse(BaseModel):
    """Response body for the batch analytics endpoint."""

    success: bool = True
    timeframe: str
    format: AnalyticsFormat
    summary: BatchSummary
    data: list[dict]
    errors: Optional[list[BatchError]] = None
    last_updated: datetime


# =============================================================================
# COMPARISON
# =============================================================================


class ComparisonRequest(BaseModel):
    """Body of POST /analytics/batch. Only action="compare" is supported."""

    action: str
    tickers: list[str] = Field(default_factory=list)
    timeframe: Timeframe = Timeframe.Y1


class ComparisonRow(BaseModel):
    """One ticker's line in a side-by-side comparison."""

    ticker: str
    current_price: float
    performance: PricePerformance
    volatility: float
    rsi: float
    trend: TrendDirection
    signals: int


class ComparisonInsights(BaseModel):
    best_performer: dict[str, ComparisonRow]  # keyed by 24h / 7d / 30d
    most_volatile: ComparisonRow
    least_volatile: ComparisonRow
    strongest_trend: int = Field(..., ge=0, description="Number of BULLISH tickers")
    average_rsi: float


class ComparisonResult(BaseModel):
    """
    Comparison of 2-5 tickers.

    `insights` is None when no ticker produced analytics.
    """

    tickers: list[str]
    timeframe: str
    data: list[ComparisonRow]
    insights: Optional[ComparisonInsights] = None
    errors: list[BatchError] = Field(default_factory=list)
    last_updated: datetime


class ComparisonResponse(BaseModel):
    success: bool = True
    comparison: ComparisonResult
