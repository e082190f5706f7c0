"""
CONTRACT 3: Risk Assessment

Input: ticker (quote + company reference data)
Output: MarketData with RiskFlag list and a 0-1 risk score
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class RiskFlagType(str, Enum):
    EARNINGS = "earnings"
    VOLATILITY = "volatility"
    FLOAT = "float"
    NEWS = "news"
    SECTOR = "sector"


class RiskSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# RISK RECORDS
# =============================================================================


class RiskFlag(BaseModel):
    """Single risk factor attached to a ticker or portfolio."""

    type: RiskFlagType
    severity: RiskSeverity
    description: str
    impact: float = Field(..., ge=0, le=1, description="Negative impact on recommendation score")


class MarketData(BaseModel):
    """Quote plus reference data used for risk assessment."""

    ticker: str
    current_price: float = Field(..., ge=0)
    change_percent: float = 0.0
    volume: int = Field(default=0, ge=0)
    market_cap: float = Field(default=0.0, ge=0)
    pe_ratio: float = 0.0
    earnings_date: Optional[date] = None
    volatility_30d: float = Field(default=0.0, ge=0, description="Intraday range as % of price")
    share_float: float = Field(default=0.0, ge=0, description="Millions of shares")
    sector: str = "Unknown"
    risk_flags: list[RiskFlag] = Field(default_factory=list)
    risk_score: float = Field(default=0.0, ge=0, le=1)
    last_updated: datetime


class NewsSentimentResult(BaseModel):
    """Keyword sentiment averaged over recent headlines."""

    ticker: str
    sentiment: float
    news_count: int = Field(..., ge=0)


class SectorConcentrationRequest(BaseModel):
    """Portfolio tickers to check for sector concentration."""

    tickers: list[str] = Field(..., min_length=1, max_length=50)


class SectorConcentrationResponse(BaseModel):
    exposure: dict[str, int]
    total_stocks: int
    flags: list[RiskFlag]
