import pytest

from conftest import build_candles

from stock_advisor.schemas.analytics import MACDSignalMode, SignalType
from stock_advisor.services.base import InsufficientDataError
from stock_advisor.services.indicators.service import TechnicalAnalysisService


@pytest.fixture
def service():
    return TechnicalAnalysisService(macd_signal_mode=MACDSignalMode.LEGACY)


def test_indicator_bundle_rejects_199_points(service, uptrend_candles):
    with pytest.raises(InsufficientDataError) as exc_info:
        service.calculate_technical_indicators(uptrend_candles[:199])
    assert "minimum 200" in exc_info.value.message
    assert exc_info.value.details == {"points": 199, "required": 200}


def test_indicator_bundle_accepts_200_points(service, uptrend_candles):
    indicators = service.calculate_technical_indicators(uptrend_candles[:200])
    assert indicators.rsi14 == 100.0
    assert indicators.sma200 == pytest.approx(100 + 0.5 * 99.5)


def test_indicators_on_linear_uptrend(service, uptrend_candles):
    indicators = service.calculate_technical_indicators(uptrend_candles)
    assert indicators.sma20 == pytest.approx(219.75)
    assert indicators.sma50 == pytest.approx(212.25)
    assert indicators.ema12 > indicators.ema26
    assert indicators.macd.line > 0
    assert indicators.macd.signal == pytest.approx(indicators.macd.line * 0.2)
    assert indicators.atr14 == pytest.approx(2.0)
    bands = indicators.bollinger_bands
    assert bands.lower < bands.middle < bands.upper


def test_no_signals_below_50_points(service, uptrend_candles):
    assert service.generate_trading_signals(uptrend_candles[:49]) == []


def test_no_signals_between_50_and_199_points(service, uptrend_candles, caplog):
    assert service.generate_trading_signals(uptrend_candles[:120]) == []
    assert "Skipping signal generation" in caplog.text


def test_uptrend_signals(service, uptrend_candles):
    signals = {s.indicator: s for s in service.generate_trading_signals(uptrend_candles)}

    assert signals["SMA_CROSSOVER"].type == SignalType.BUY
    assert signals["MACD_BULLISH"].type == SignalType.BUY
    # a loss-free series pins RSI at 100
    assert signals["RSI_OVERBOUGHT"].type == SignalType.SELL
    # last close 224.5 sits inside the upper band (~225.5)
    assert "BOLLINGER_OVERBOUGHT" not in signals


def test_downtrend_signals():
    service = TechnicalAnalysisService(macd_signal_mode=MACDSignalMode.LEGACY)
    candles = build_candles([300 - i * 0.5 for i in range(250)])
    signals = {s.indicator: s for s in service.generate_trading_signals(candles)}

    assert signals["SMA_CROSSOVER"].type == SignalType.SELL
    assert signals["RSI_OVERSOLD"].type == SignalType.BUY
    assert signals["MACD_BEARISH"].type == SignalType.SELL


def test_ema_signal_mode(uptrend_candles):
    service = TechnicalAnalysisService(macd_signal_mode=MACDSignalMode.EMA)
    macd = service.calculate_technical_indicators(uptrend_candles).macd
    assert macd.signal == pytest.approx(macd.line, abs=1e-3)
    assert macd.histogram == pytest.approx(macd.line - macd.signal)


def test_trend_and_levels_delegate(service, uptrend_candles):
    assert service.analyze_trend(uptrend_candles).duration_days >= 0
    assert service.find_support_levels(uptrend_candles) == []
    assert service.find_resistance_levels(uptrend_candles) == []
