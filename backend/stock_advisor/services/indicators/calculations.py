"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
All math is deterministic.

Every function returns the indicator value at the LAST point of the
series. Short input never raises: each indicator falls back to a neutral
default (0 for averages/ranges, 50 for RSI).
"""

from dataclasses import dataclass

import numpy as np

from stock_advisor.schemas.analytics import MACDSignalMode
from stock_advisor.schemas.market import OHLCV


@dataclass
class OHLCVArrays:
    """High/low/close arrays for calculations."""

    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray

    @classmethod
    def from_candles(cls, candles: list[OHLCV]) -> "OHLCVArrays":
        return cls(
            highs=np.array([c.high for c in candles], dtype=float),
            lows=np.array([c.low for c in candles], dtype=float),
            closes=np.array([c.close for c in candles], dtype=float),
        )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> float:
    """Simple Moving Average of the last `period` values."""
    if len(data) < period:
        return 0.0
    return float(np.mean(data[-period:]))


def ema_series(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average at every point.

    Seeded with the first value (not an SMA) and run over the full history.
    """
    result = np.zeros(len(data))
    if len(data) == 0:
        return result

    multiplier = 2 / (period + 1)
    result[0] = data[0]
    for i in range(1, len(data)):
        result[i] = data[i] * multiplier + result[i - 1] * (1 - multiplier)
    return result


def ema(data: np.ndarray, period: int) -> float:
    """Exponential Moving Average at the last point."""
    if len(data) < period:
        return 0.0
    return float(ema_series(data, period)[-1])


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> float:
    """
    Relative Strength Index with Wilder smoothing.

    Returns 50 when there are fewer than period + 1 closes or when the
    series never moves, and 100 when there are gains but no losses.
    """
    if len(closes) < period + 1:
        return 50.0

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 50.0 if avg_gain == 0 else 100.0

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
    signal_mode: MACDSignalMode = MACDSignalMode.LEGACY,
) -> tuple[float, float, float]:
    """
    MACD (Moving Average Convergence Divergence).

    LEGACY mode approximates the signal line as 0.2 * MACD line.
    EMA mode uses a true `signal_period` EMA of the MACD line history.

    Returns: (macd_line, signal_line, histogram)
    """
    macd_line = ema(closes, fast_period) - ema(closes, slow_period)

    if signal_mode == MACDSignalMode.EMA:
        if len(closes) < slow_period:
            signal_line = 0.0
        else:
            line_history = ema_series(closes, fast_period) - ema_series(closes, slow_period)
            signal_line = ema(line_history, signal_period)
    else:
        signal_line = macd_line * 0.2

    histogram = macd_line - signal_line
    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[float, float, float]:
    """
    Bollinger Bands using the population standard deviation.

    Returns: (upper, middle, lower)
    """
    middle = sma(closes, period)
    window = closes[-period:]
    if len(window) == 0:
        return middle, middle, middle

    # Deviation is measured from the SMA, which is 0 for short input
    std = float(np.sqrt(np.sum((window - middle) ** 2) / period))

    return middle + std_dev * std, middle, middle - std_dev * std


def true_ranges(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True range for every point after the first."""
    if len(closes) < 2:
        return np.zeros(0)

    prev_closes = closes[:-1]
    return np.maximum.reduce([
        highs[1:] - lows[1:],
        np.abs(highs[1:] - prev_closes),
        np.abs(lows[1:] - prev_closes),
    ])


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> float:
    """Average True Range: simple mean of the last `period` true ranges."""
    if len(highs) < period + 1:
        return 0.0
    return float(np.mean(true_ranges(highs, lows, closes)[-period:]))


# =============================================================================
# REGRESSION
# =============================================================================


def linear_regression_slope(values: np.ndarray) -> float:
    """Least-squares slope of `values` against their index."""
    n = len(values)
    if n < 2:
        return 0.0

    x = np.arange(n, dtype=float)
    sum_x = x.sum()
    sum_y = float(np.sum(values))
    sum_xy = float(np.sum(x * values))
    sum_xx = float(np.sum(x * x))

    return (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
