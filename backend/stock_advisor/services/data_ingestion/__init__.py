"""
Data Ingestion Service

CONTRACT:
    Input:  HistoricalDataRequest / ticker
    Output: list[OHLCV], Quote, provider reference records

RESPONSIBILITIES:
    - Fetch daily candles and live quotes from Finnhub
    - Fetch company profile, financials, earnings and news for risk checks
    - Normalize all data to standard schemas
    - Cache candle series in Redis (memory fallback)

Pure data fetching and transformation.
"""

from stock_advisor.services.data_ingestion.interface import MarketDataProvider
from stock_advisor.services.data_ingestion.finnhub_adapter import FinnhubProvider
from stock_advisor.services.data_ingestion.service import (
    HistoricalDataService,
    get_historical_data_service,
)

__all__ = [
    "MarketDataProvider",
    "FinnhubProvider",
    "HistoricalDataService",
    "get_historical_data_service",
]
