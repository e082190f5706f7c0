"""
Risk API Endpoints

Per-ticker risk flags, portfolio sector concentration and news sentiment.
"""

from fastapi import APIRouter, HTTPException, Query

from stock_advisor.schemas.risk import (
    MarketData,
    NewsSentimentResult,
    SectorConcentrationRequest,
    SectorConcentrationResponse,
)
from stock_advisor.services.risk import get_risk_service
from stock_advisor.services.risk.assessment import assess_sector_concentration

router = APIRouter()


@router.post("/sector-concentration", response_model=SectorConcentrationResponse)
async def get_sector_concentration(request: SectorConcentrationRequest):
    """
    Check a list of holdings for sector concentration.

    Flags any sector holding more than 40% of the names.
    """
    service = get_risk_service()
    exposure = await service.get_sector_exposure(request.tickers)
    total = len(request.tickers)

    return SectorConcentrationResponse(
        exposure=exposure,
        total_stocks=total,
        flags=assess_sector_concentration(exposure, total),
    )


@router.get("/{ticker}", response_model=MarketData)
async def get_ticker_risk(ticker: str):
    """Get market data with risk flags and a 0-1 risk score."""
    market_data = await get_risk_service().get_market_data(ticker)
    if market_data is None:
        raise HTTPException(status_code=404, detail=f"Market data not found for {ticker}")
    return market_data


@router.get("/{ticker}/sentiment", response_model=NewsSentimentResult)
async def get_news_sentiment(ticker: str, days: int = Query(default=7, ge=1, le=30)):
    """Get keyword sentiment over recent company headlines."""
    return await get_risk_service().get_news_sentiment(ticker, days)
