"""
CONTRACT 1: Market Data

Input: ticker + Timeframe
Output: Quote, list[OHLCV], provider reference records

These are the normalized shapes every market data provider must return.
Analytics code never sees raw provider JSON.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from stock_advisor.services.base import ValidationError


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    D1 = "1D"
    D7 = "7D"
    M1 = "1M"
    M3 = "3M"
    M6 = "6M"
    Y1 = "1Y"
    Y2 = "2Y"

    @property
    def days(self) -> int:
        """Look-back window in calendar days."""
        return TIMEFRAME_DAYS[self]


TIMEFRAME_DAYS = {
    Timeframe.D1: 1,
    Timeframe.D7: 7,
    Timeframe.M1: 30,
    Timeframe.M3: 90,
    Timeframe.M6: 180,
    Timeframe.Y1: 365,
    Timeframe.Y2: 730,
}


# =============================================================================
# INPUT: HistoricalDataRequest
# =============================================================================


class HistoricalDataRequest(BaseModel):
    """
    Request for a daily candle history.
    Sent by: Market Analytics Service / API
    Received by: Historical Data Service
    """

    ticker: str = Field(..., min_length=1, max_length=10)
    timeframe: Timeframe = Timeframe.Y1


# =============================================================================
# PRICE DATA
# =============================================================================


class OHLCV(BaseModel):
    """Single daily candle."""

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: int = Field(..., ge=0)

    class Config:
        frozen = True


class Quote(BaseModel):
    """Current quote snapshot for a ticker."""

    current_price: float = Field(..., gt=0)
    day_change: float = 0.0
    day_change_percent: float = 0.0
    day_high: Optional[float] = None
    day_low: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None
    volume: int = Field(default=0, ge=0)
    timestamp: Optional[datetime] = None

    class Config:
        frozen = True


def validate_series(candles: list[OHLCV], ticker: str = "") -> list[OHLCV]:
    """
    Check that a candle series is strictly ascending by timestamp.

    Gaps are allowed; duplicates and out-of-order points are not.
    """
    for prev, curr in zip(candles, candles[1:]):
        if curr.timestamp <= prev.timestamp:
            raise ValidationError(
                "MarketData",
                f"Series for {ticker or 'ticker'} is not strictly chronological",
                {"previous": prev.timestamp.isoformat(), "current": curr.timestamp.isoformat()},
            )
    return candles


# =============================================================================
# PROVIDER REFERENCE DATA
# =============================================================================


class CompanyProfile(BaseModel):
    """Company profile fields used by risk assessment."""

    ticker: str
    name: Optional[str] = None
    sector: str = "Unknown"
    market_cap: float = Field(default=0.0, ge=0, description="Millions")
    share_outstanding: float = Field(default=0.0, ge=0, description="Millions of shares")


class EarningsEvent(BaseModel):
    """Upcoming earnings announcement."""

    ticker: str
    earnings_date: date
    estimate: float = 0.0
    actual: Optional[float] = None
    surprise: Optional[float] = None


class NewsHeadline(BaseModel):
    """Single company news headline."""

    headline: str
    source: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[datetime] = None
