"""
Risk Assessment Rules

Deterministic, auditable rules that turn market data into risk flags.
No I/O.
"""

from datetime import date
from typing import Optional

from stock_advisor.schemas.market import EarningsEvent, Quote
from stock_advisor.schemas.risk import (
    MarketData,
    RiskFlag,
    RiskFlagType,
    RiskSeverity,
)

EARNINGS_WINDOW_DAYS = 7
VOLATILITY_MEDIUM = 30
VOLATILITY_HIGH = 50
LOW_FLOAT_MILLIONS = 50
HIGH_PE_RATIO = 50
SECTOR_MEDIUM = 0.4
SECTOR_HIGH = 0.6

POSITIVE_KEYWORDS = ["rally", "surge", "gain", "profit", "beat", "strong", "growth", "upgrade"]
NEGATIVE_KEYWORDS = ["fall", "drop", "loss", "miss", "weak", "decline", "downgrade", "concern"]


def intraday_volatility(quote: Quote) -> float:
    """Day range as a percentage of the current price."""
    if not quote.current_price:
        return 0.0
    if quote.day_high is None or quote.day_low is None:
        return 0.0
    return (quote.day_high - quote.day_low) / quote.current_price * 100


def is_earnings_within(earnings_date: date, today: date, days: int = EARNINGS_WINDOW_DAYS) -> bool:
    """Earnings fall within `days` of today, before or after."""
    return abs((earnings_date - today).days) <= days


def assess_risk_flags(
    market_data: MarketData,
    earnings: Optional[EarningsEvent],
    today: date,
) -> list[RiskFlag]:
    flags: list[RiskFlag] = []

    if earnings and is_earnings_within(earnings.earnings_date, today):
        flags.append(RiskFlag(
            type=RiskFlagType.EARNINGS,
            severity=RiskSeverity.MEDIUM,
            description=f"Earnings announcement on {earnings.earnings_date.isoformat()}",
            impact=0.15,
        ))

    volatility = market_data.volatility_30d
    if volatility > VOLATILITY_MEDIUM:
        high = volatility > VOLATILITY_HIGH
        flags.append(RiskFlag(
            type=RiskFlagType.VOLATILITY,
            severity=RiskSeverity.HIGH if high else RiskSeverity.MEDIUM,
            description=f"High volatility: {volatility:.1f}% in 30 days",
            impact=0.25 if high else 0.15,
        ))

    if 0 < market_data.share_float < LOW_FLOAT_MILLIONS:
        flags.append(RiskFlag(
            type=RiskFlagType.FLOAT,
            severity=RiskSeverity.MEDIUM,
            description=f"Low share float: {market_data.share_float:g}M shares",
            impact=0.1,
        ))

    # Valuation risk is reported under the news category
    if market_data.pe_ratio > HIGH_PE_RATIO:
        flags.append(RiskFlag(
            type=RiskFlagType.NEWS,
            severity=RiskSeverity.LOW,
            description=f"High P/E ratio: {market_data.pe_ratio:.1f}",
            impact=0.05,
        ))

    return flags


def assess_sector_concentration(
    sector_exposure: dict[str, int], total_stocks: int
) -> list[RiskFlag]:
    """Flag sectors holding more than 40% of the portfolio's names."""
    flags: list[RiskFlag] = []
    if total_stocks <= 0:
        return flags

    for sector, count in sector_exposure.items():
        concentration = count / total_stocks
        if concentration > SECTOR_MEDIUM:
            high = concentration > SECTOR_HIGH
            flags.append(RiskFlag(
                type=RiskFlagType.SECTOR,
                severity=RiskSeverity.HIGH if high else RiskSeverity.MEDIUM,
                description=f"High concentration in {sector}: {concentration * 100:.1f}%",
                impact=0.2 if high else 0.1,
            ))
    return flags


def calculate_risk_score(flags: list[RiskFlag]) -> float:
    """Sum of flag impacts, capped at 1 (0 = no risk)."""
    return min(1.0, sum(flag.impact for flag in flags))


def score_headline(headline: str) -> int:
    text = headline.lower()
    positive = sum(1 for word in POSITIVE_KEYWORDS if word in text)
    negative = sum(1 for word in NEGATIVE_KEYWORDS if word in text)
    return positive - negative


def score_headline_sentiment(headlines: list[str]) -> float:
    """Average keyword score per headline; 0 with no headlines."""
    if not headlines:
        return 0.0
    return sum(score_headline(h) for h in headlines) / len(headlines)
