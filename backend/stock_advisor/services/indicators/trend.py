"""
Trend and Support/Resistance Analysis

Classifies recent direction with a normalized regression slope and
finds support/resistance from local extrema.
"""

import numpy as np

from stock_advisor.schemas.analytics import TrendAnalysis, TrendDirection
from stock_advisor.schemas.market import OHLCV
from stock_advisor.services.indicators.calculations import linear_regression_slope

TREND_WINDOW = 20
TREND_SLOPE_THRESHOLD = 0.02
DAY_MOVE_THRESHOLD = 0.01
EXTREMA_NEIGHBORS = 2
MAX_LEVELS = 3


# =============================================================================
# TREND
# =============================================================================


def trend_slope(closes: np.ndarray) -> float:
    """Regression slope normalized by the first price in the window."""
    if len(closes) == 0 or closes[0] == 0:
        return 0.0
    return linear_regression_slope(closes) / closes[0]


def day_trend(candles: list[OHLCV], index: int) -> TrendDirection:
    """Direction of a single day's close-to-close move."""
    if index == 0:
        return TrendDirection.NEUTRAL

    prev_close = candles[index - 1].close
    change = (candles[index].close - prev_close) / prev_close
    if change > DAY_MOVE_THRESHOLD:
        return TrendDirection.BULLISH
    if change < -DAY_MOVE_THRESHOLD:
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def analyze_trend(candles: list[OHLCV]) -> TrendAnalysis:
    """
    Classify the trend of the last TREND_WINDOW closes.

    Duration counts the current day plus every consecutive earlier day
    (walking back from the second-to-last) whose own direction matches
    the overall classification.
    """
    if len(candles) < TREND_WINDOW:
        return TrendAnalysis(
            direction=TrendDirection.NEUTRAL, strength=0.0, duration_days=0
        )

    recent = np.array([c.close for c in candles[-TREND_WINDOW:]], dtype=float)
    slope = trend_slope(recent)

    if slope > TREND_SLOPE_THRESHOLD:
        direction = TrendDirection.BULLISH
    elif slope < -TREND_SLOPE_THRESHOLD:
        direction = TrendDirection.BEARISH
    else:
        direction = TrendDirection.NEUTRAL

    duration = 1
    for i in range(len(candles) - 2, -1, -1):
        if day_trend(candles, i) != direction:
            break
        duration += 1

    return TrendAnalysis(
        direction=direction,
        strength=min(1.0, abs(slope) * 10),
        duration_days=duration,
    )


# =============================================================================
# SUPPORT / RESISTANCE
# =============================================================================


def _local_extrema(values: np.ndarray, find_max: bool) -> list[float]:
    """Points that are <= (or >=) every neighbor within EXTREMA_NEIGHBORS."""
    k = EXTREMA_NEIGHBORS
    levels = []
    for i in range(k, len(values) - k):
        neighbors = np.concatenate((values[i - k : i], values[i + 1 : i + k + 1]))
        if find_max:
            is_extreme = bool(np.all(values[i] >= neighbors))
        else:
            is_extreme = bool(np.all(values[i] <= neighbors))
        if is_extreme:
            levels.append(float(values[i]))
    return levels


def find_support_levels(candles: list[OHLCV]) -> list[float]:
    """
    Local minima of the lows.

    The three HIGHEST minima are returned, highest first.
    """
    lows = np.array([c.low for c in candles], dtype=float)
    return sorted(_local_extrema(lows, find_max=False), reverse=True)[:MAX_LEVELS]


def find_resistance_levels(candles: list[OHLCV]) -> list[float]:
    """Local maxima of the highs, three highest first."""
    highs = np.array([c.high for c in candles], dtype=float)
    return sorted(_local_extrema(highs, find_max=True), reverse=True)[:MAX_LEVELS]
