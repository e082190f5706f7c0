"""
Indicator API Endpoints

Endpoints for technical indicator calculations.
"""

import logging

from fastapi import APIRouter, HTTPException

from stock_advisor.schemas.analytics import TechnicalIndicators, TrendAnalysis
from stock_advisor.schemas.market import OHLCV, Timeframe
from stock_advisor.services.base import InsufficientDataError
from stock_advisor.services.data_ingestion import get_historical_data_service
from stock_advisor.services.indicators import get_technical_analysis_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_history(ticker: str, timeframe: Timeframe) -> list[OHLCV]:
    data_service = get_historical_data_service()
    candles = await data_service.get_historical_data(ticker.upper(), timeframe)
    if not candles:
        raise HTTPException(status_code=404, detail=f"Data not found for {ticker}")
    return candles


@router.get("/{ticker}", response_model=TechnicalIndicators)
async def get_indicators(ticker: str, timeframe: Timeframe = Timeframe.Y1):
    """
    Get the indicator set at the latest candle.

    Returns:
        - SMA 20/50/200, EMA 12/26
        - RSI 14
        - MACD line/signal/histogram
        - Bollinger Bands (20, 2)
        - ATR 14

    Requires at least 200 daily candles.
    """
    candles = await _load_history(ticker, timeframe)

    try:
        return get_technical_analysis_service().calculate_technical_indicators(candles)
    except InsufficientDataError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())


@router.get("/{ticker}/signals")
async def get_signals(ticker: str, timeframe: Timeframe = Timeframe.Y1):
    """Get BUY/SELL signals for the latest candle."""
    candles = await _load_history(ticker, timeframe)
    signals = get_technical_analysis_service().generate_trading_signals(candles)

    return {
        "ticker": ticker.upper(),
        "current_price": candles[-1].close,
        "signals": [s.model_dump(mode="json") for s in signals],
    }


@router.get("/{ticker}/trend", response_model=TrendAnalysis)
async def get_trend(ticker: str, timeframe: Timeframe = Timeframe.Y1):
    """Get trend direction, strength and duration."""
    candles = await _load_history(ticker, timeframe)
    return get_technical_analysis_service().analyze_trend(candles)


@router.get("/{ticker}/levels")
async def get_levels(ticker: str, timeframe: Timeframe = Timeframe.Y1):
    """
    Get support/resistance levels for a ticker.
    """
    candles = await _load_history(ticker, timeframe)
    service = get_technical_analysis_service()

    return {
        "ticker": ticker.upper(),
        "current_price": candles[-1].close,
        "support": service.find_support_levels(candles),
        "resistance": service.find_resistance_levels(candles),
    }
