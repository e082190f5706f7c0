"""
Market Analytics API Endpoints

Composite price analytics for one or many tickers.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response

from stock_advisor.core.config import settings
from stock_advisor.schemas.analytics import (
    AnalyticsFormat,
    BatchAnalyticsResponse,
    BatchError,
    BatchSummary,
    ComparisonRequest,
    ComparisonResponse,
)
from stock_advisor.schemas.market import Timeframe
from stock_advisor.services.analytics import format_analytics, get_market_analytics_service
from stock_advisor.services.base import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_TICKER_LENGTH = 10
BATCH_CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=600"


def parse_tickers(tickers: Optional[str]) -> list[str]:
    """Split, trim and upper-case a comma-separated ticker list."""
    if not tickers:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Missing tickers parameter",
                "code": "MISSING_TICKERS",
                "example": "/api/v1/analytics/batch?tickers=AAPL,MSFT,GOOGL",
            },
        )

    parsed = [t.strip().upper() for t in tickers.split(",") if t.strip()]
    if not parsed:
        raise HTTPException(
            status_code=400,
            detail={"error": "No valid tickers provided", "code": "INVALID_TICKERS"},
        )

    if len(parsed) > settings.max_batch_tickers:
        raise HTTPException(
            status_code=400,
            detail={
                "error": f"Maximum {settings.max_batch_tickers} tickers allowed per request",
                "code": "TOO_MANY_TICKERS",
            },
        )
    return parsed


@router.get("/batch", response_model=BatchAnalyticsResponse)
async def get_batch_analytics(
    response: Response,
    tickers: Optional[str] = Query(default=None, description="Comma-separated tickers"),
    timeframe: Timeframe = Timeframe.Y1,
    format: AnalyticsFormat = AnalyticsFormat.SIMPLE,
):
    """
    Get analytics for up to 10 tickers at once.

    Tickers that fail are reported under `errors`; the rest still succeed.
    """
    ticker_list = parse_tickers(tickers)
    logger.info(f"Fetching batch analytics for {len(ticker_list)} tickers: {', '.join(ticker_list)}")

    service = get_market_analytics_service()
    batch = await service.get_batch_analytics(ticker_list, timeframe)

    data = [
        format_analytics(batch.results[t], format)
        for t in ticker_list
        if t in batch.results
    ]
    errors = [BatchError(ticker=t, error=msg) for t, msg in batch.errors.items()]

    response.headers["Cache-Control"] = BATCH_CACHE_CONTROL

    return BatchAnalyticsResponse(
        timeframe=timeframe.value,
        format=format,
        summary=BatchSummary(
            requested=len(ticker_list),
            successful=len(data),
            failed=len(errors),
        ),
        data=data,
        errors=errors or None,
        last_updated=datetime.now(timezone.utc),
    )


@router.post("/batch", response_model=ComparisonResponse)
async def compare_tickers(request: ComparisonRequest):
    """
    Compare 2-5 tickers side by side.

    Body: {"action": "compare", "tickers": ["AAPL", "MSFT"], "timeframe": "1Y"}
    """
    if request.action != "compare":
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid action. Supported actions: compare", "code": "INVALID_ACTION"},
        )

    tickers = [t.strip().upper() for t in request.tickers if t.strip()]
    service = get_market_analytics_service()

    try:
        comparison = await service.get_comparison(tickers, request.timeframe)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    return ComparisonResponse(comparison=comparison)


@router.get("/{ticker}")
async def get_ticker_analytics(
    ticker: str,
    timeframe: Timeframe = Timeframe.Y1,
    format: AnalyticsFormat = AnalyticsFormat.DETAILED,
):
    """
    Get composite analytics for a ticker.

    Formats:
        - simple: price, change, short-horizon performance, trend, signal count
        - chart: price, candles, indicator set
        - technicals: key moving averages, RSI, trend, top 3 signals
        - detailed: everything except candles
    """
    ticker = ticker.strip().upper()
    if not ticker or len(ticker) > MAX_TICKER_LENGTH:
        raise HTTPException(status_code=400, detail="Invalid ticker symbol")

    service = get_market_analytics_service()
    analytics = await service.get_market_analytics(ticker, timeframe)

    if analytics is None:
        raise HTTPException(status_code=404, detail=f"Analytics unavailable for {ticker}")

    return {
        "success": True,
        "ticker": ticker,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data": format_analytics(analytics, format),
    }
