"""
Market Data Provider Interface

Defines the contract every upstream market data source implements.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from stock_advisor.schemas.market import (
    OHLCV,
    Quote,
    CompanyProfile,
    EarningsEvent,
    NewsHeadline,
)


class MarketDataProvider(ABC):
    """
    Market Data Provider Contract.

    Implementations normalize provider JSON into schema objects and raise
    ExternalAPIError (or RateLimitError) when the upstream call fails.
    A ticker the provider does not know is not an error: lookups return
    None or an empty list.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def get_quote(self, ticker: str) -> Optional[Quote]:
        """Current quote snapshot."""
        pass

    @abstractmethod
    async def get_candles(
        self, ticker: str, start: datetime, end: datetime
    ) -> list[OHLCV]:
        """Daily candles between start and end, oldest first."""
        pass

    @abstractmethod
    async def get_company_profile(self, ticker: str) -> Optional[CompanyProfile]:
        pass

    @abstractmethod
    async def get_basic_financials(self, ticker: str) -> dict:
        """Raw metric map (P/E etc.)."""
        pass

    @abstractmethod
    async def get_earnings(
        self, ticker: str, start: date, end: date
    ) -> Optional[EarningsEvent]:
        """First earnings event in the window, if any."""
        pass

    @abstractmethod
    async def get_company_news(
        self, ticker: str, start: date, end: date
    ) -> list[NewsHeadline]:
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass

    async def health_check(self) -> bool:
        return True
