"""
Market Analytics Metrics

Performance, volatility and volume statistics over a daily candle series.
Pure NumPy, no I/O.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import numpy as np

from stock_advisor.schemas.analytics import (
    PricePerformance,
    VolatilityMetrics,
    VolatilityRanking,
    VolumeAnalysis,
    VolumeTrend,
)
from stock_advisor.schemas.market import OHLCV

TRADING_DAYS_PER_YEAR = 252
VOLATILITY_WINDOW = 30
LOW_VOLATILITY = 0.20
HIGH_VOLATILITY = 0.40
VOLUME_AVERAGE_WINDOW = 20
VOLUME_TREND_WINDOW = 5
VOLUME_TREND_THRESHOLD = 0.1


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _pct_change(current: float, reference: Optional[float]) -> float:
    if not reference:
        return 0.0
    return (current - reference) / reference * 100


# =============================================================================
# PERFORMANCE
# =============================================================================


def find_price_by_date(candles: list[OHLCV], target: datetime) -> Optional[float]:
    """Close of the candle nearest to `target` (either side)."""
    if not candles:
        return None

    target = _as_utc(target)
    closest = min(candles, key=lambda c: abs(_as_utc(c.timestamp) - target))
    return closest.close


def calculate_performance(
    candles: list[OHLCV], current_price: float, now: datetime
) -> PricePerformance:
    """
    Percentage change from several historical reference points to `current_price`.

    24h compares against the last close; 1h needs intraday data and stays 0.
    """
    if not candles:
        return PricePerformance()

    now = _as_utc(now)
    year_start = datetime(now.year, 1, 1, tzinfo=timezone.utc)

    return PricePerformance(
        one_hour=0.0,
        day=_pct_change(current_price, candles[-1].close),
        week=_pct_change(current_price, find_price_by_date(candles, now - timedelta(days=7))),
        month=_pct_change(current_price, find_price_by_date(candles, now - timedelta(days=30))),
        ytd=_pct_change(current_price, find_price_by_date(candles, year_start)),
        year=_pct_change(current_price, find_price_by_date(candles, now - timedelta(days=365))),
    )


# =============================================================================
# VOLATILITY
# =============================================================================


def daily_returns(candles: list[OHLCV]) -> np.ndarray:
    closes = np.array([c.close for c in candles], dtype=float)
    if len(closes) < 2:
        return np.zeros(0)
    return np.diff(closes) / closes[:-1]


def annualized_volatility(returns: np.ndarray) -> float:
    """Population stddev of returns scaled to a trading year."""
    if len(returns) == 0:
        return 0.0
    return float(np.std(returns) * np.sqrt(TRADING_DAYS_PER_YEAR))


def volatility_percentile(current: float, returns: np.ndarray) -> int:
    """
    Share of rolling 30-return windows whose volatility is below `current`.

    Windows end before the most recent return.
    """
    rolling = [
        annualized_volatility(returns[i - VOLATILITY_WINDOW : i])
        for i in range(VOLATILITY_WINDOW, len(returns))
    ]
    if not rolling:
        return 0

    lower = sum(1 for vol in rolling if vol < current)
    return round(lower / len(rolling) * 100)


def calculate_volatility_metrics(candles: list[OHLCV]) -> VolatilityMetrics:
    returns = daily_returns(candles)
    current = annualized_volatility(returns)
    average30d = annualized_volatility(returns[-VOLATILITY_WINDOW:])

    if current < LOW_VOLATILITY:
        ranking = VolatilityRanking.LOW
    elif current > HIGH_VOLATILITY:
        ranking = VolatilityRanking.HIGH
    else:
        ranking = VolatilityRanking.MEDIUM

    return VolatilityMetrics(
        current=current,
        average30d=average30d,
        percentile=volatility_percentile(current, returns),
        ranking=ranking,
    )


# =============================================================================
# VOLUME
# =============================================================================


def calculate_volume_analysis(candles: list[OHLCV]) -> VolumeAnalysis:
    """Latest volume vs. its 20-day average, plus a 5-day vs prior-5-day trend."""
    if not candles:
        return VolumeAnalysis(current=0, average20d=0.0, ratio=0.0, trend=VolumeTrend.STABLE)

    volumes = np.array([c.volume for c in candles[-VOLUME_AVERAGE_WINDOW:]], dtype=float)
    current = candles[-1].volume
    average20d = float(np.mean(volumes))
    ratio = current / average20d if average20d > 0 else 0.0

    recent = volumes[-VOLUME_TREND_WINDOW:]
    earlier = volumes[-2 * VOLUME_TREND_WINDOW : -VOLUME_TREND_WINDOW]

    trend = VolumeTrend.STABLE
    if len(earlier) > 0 and np.mean(earlier) > 0:
        change = (np.mean(recent) - np.mean(earlier)) / np.mean(earlier)
        if change > VOLUME_TREND_THRESHOLD:
            trend = VolumeTrend.INCREASING
        elif change < -VOLUME_TREND_THRESHOLD:
            trend = VolumeTrend.DECREASING

    return VolumeAnalysis(
        current=current,
        average20d=average20d,
        ratio=ratio,
        trend=trend,
    )
