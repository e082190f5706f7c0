"""
Signal Generator

Turns an indicator snapshot and the current price into discrete
BUY/SELL signals. Rules are independent; any subset may fire together.
"""

from typing import Optional

from stock_advisor.schemas.analytics import (
    BollingerBandsData,
    MACDData,
    SignalType,
    TechnicalIndicators,
    TradingSignal,
)

RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70


def analyze_sma_crossover(
    indicators: TechnicalIndicators, current_price: float
) -> Optional[TradingSignal]:
    """Price stacked above/below SMA20 and SMA50."""
    if current_price > indicators.sma20 > indicators.sma50:
        return TradingSignal(
            type=SignalType.BUY,
            indicator="SMA_CROSSOVER",
            strength=0.8,
            description="Price above SMA20 and SMA50, bullish trend confirmed",
        )
    if current_price < indicators.sma20 < indicators.sma50:
        return TradingSignal(
            type=SignalType.SELL,
            indicator="SMA_CROSSOVER",
            strength=0.7,
            description="Price below SMA20 and SMA50, bearish trend confirmed",
        )
    return None


def analyze_rsi(rsi: float) -> Optional[TradingSignal]:
    if rsi < RSI_OVERSOLD:
        return TradingSignal(
            type=SignalType.BUY,
            indicator="RSI_OVERSOLD",
            strength=0.6,
            description=f"RSI at {rsi:.1f}, oversold condition",
        )
    if rsi > RSI_OVERBOUGHT:
        return TradingSignal(
            type=SignalType.SELL,
            indicator="RSI_OVERBOUGHT",
            strength=0.6,
            description=f"RSI at {rsi:.1f}, overbought condition",
        )
    return None


def analyze_macd(macd: MACDData) -> Optional[TradingSignal]:
    if macd.line > macd.signal and macd.histogram > 0:
        return TradingSignal(
            type=SignalType.BUY,
            indicator="MACD_BULLISH",
            strength=0.7,
            description="MACD line above signal line, bullish momentum",
        )
    if macd.line < macd.signal and macd.histogram < 0:
        return TradingSignal(
            type=SignalType.SELL,
            indicator="MACD_BEARISH",
            strength=0.7,
            description="MACD line below signal line, bearish momentum",
        )
    return None


def analyze_bollinger_bands(
    bands: BollingerBandsData, current_price: float
) -> Optional[TradingSignal]:
    # Touching a band counts
    if current_price <= bands.lower:
        return TradingSignal(
            type=SignalType.BUY,
            indicator="BOLLINGER_OVERSOLD",
            strength=0.6,
            description="Price at lower Bollinger Band, potential reversal",
        )
    if current_price >= bands.upper:
        return TradingSignal(
            type=SignalType.SELL,
            indicator="BOLLINGER_OVERBOUGHT",
            strength=0.6,
            description="Price at upper Bollinger Band, potential reversal",
        )
    return None


def generate_signals(
    indicators: TechnicalIndicators, current_price: float
) -> list[TradingSignal]:
    """Apply every rule and collect the signals that fired."""
    candidates = [
        analyze_sma_crossover(indicators, current_price),
        analyze_rsi(indicators.rsi14),
        analyze_macd(indicators.macd),
        analyze_bollinger_bands(indicators.bollinger_bands, current_price),
    ]
    return [signal for signal in candidates if signal is not None]
