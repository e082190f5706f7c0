from conftest import build_candles

from stock_advisor.schemas.analytics import TrendDirection
from stock_advisor.services.indicators.trend import (
    MAX_LEVELS,
    analyze_trend,
    find_resistance_levels,
    find_support_levels,
)


def test_short_series_is_neutral():
    result = analyze_trend(build_candles([100.0 + i for i in range(19)]))
    assert result.direction == TrendDirection.NEUTRAL
    assert result.strength == 0
    assert result.duration == "0 days"


def test_steep_uptrend_is_bullish():
    closes = [100 * 1.03 ** i for i in range(30)]
    result = analyze_trend(build_candles(closes))
    assert result.direction == TrendDirection.BULLISH
    assert 0 < result.strength <= 1
    # every day but the first rose more than 1%
    assert result.duration_days == 29


def test_steep_downtrend_is_bearish():
    closes = [100 * 0.95 ** i for i in range(30)]
    result = analyze_trend(build_candles(closes))
    assert result.direction == TrendDirection.BEARISH
    assert result.strength > 0


def test_gentle_slope_stays_neutral(uptrend_candles):
    # 0.5/day on a ~215 base is ~0.2% per day, under the 2% threshold
    result = analyze_trend(uptrend_candles)
    assert result.direction == TrendDirection.NEUTRAL
    assert result.strength < 0.1


def test_duration_stops_at_first_mismatch():
    # ten flat days, then twenty 5% gains
    closes = [100.0] * 10 + [100 * 1.05 ** i for i in range(1, 21)]
    result = analyze_trend(build_candles(closes))
    assert result.direction == TrendDirection.BULLISH
    assert result.duration_days == 20


def test_support_excludes_boundary_points():
    lows = [1.0, 2.0, 60.0, 55.0, 50.0, 55.0, 60.0, 58.0, 56.0, 58.0, 2.0, 1.0]
    candles = build_candles(
        [low + 0.5 for low in lows],
        highs=[low + 1 for low in lows],
        lows=lows,
    )
    assert find_support_levels(candles) == [50.0]


def test_resistance_three_highest_descending(uptrend_closes):
    highs = [c + 1 + (1.5 if i % 10 == 5 else 0) for i, c in enumerate(uptrend_closes)]
    candles = build_candles(uptrend_closes, highs=highs)
    levels = find_resistance_levels(candles)
    assert levels == [225.0, 220.0, 215.0]
    assert all(level < max(highs) for level in levels)


def test_levels_capped_on_zigzag():
    lows = [10.0 if i % 4 == 0 else 20.0 + i % 4 for i in range(60)]
    candles = build_candles([low + 5 for low in lows], highs=[low + 10 for low in lows], lows=lows)
    support = find_support_levels(candles)
    resistance = find_resistance_levels(candles)
    assert len(support) <= MAX_LEVELS
    assert len(resistance) <= MAX_LEVELS
    assert support == sorted(support, reverse=True)
    assert resistance == sorted(resistance, reverse=True)


def test_monotonic_series_has_no_extrema(uptrend_candles):
    assert find_support_levels(uptrend_candles) == []
    assert find_resistance_levels(uptrend_candles) == []
