from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from stock_advisor.schemas.market import (
    OHLCV,
    Quote,
    CompanyProfile,
    EarningsEvent,
    NewsHeadline,
)
from stock_advisor.services.base import ExternalAPIError
from stock_advisor.services.cache.redis_client import CandleCache
from stock_advisor.services.data_ingestion.interface import MarketDataProvider
from stock_advisor.services.data_ingestion.service import HistoricalDataService

START = datetime(2025, 1, 1, tzinfo=timezone.utc)


def build_candles(closes, highs=None, lows=None, volumes=None, start=START):
    """Daily candles from close prices; highs/lows default to close +/- 1."""
    candles = []
    for i, close in enumerate(closes):
        candles.append(
            OHLCV(
                timestamp=start + timedelta(days=i),
                open=close,
                high=highs[i] if highs is not None else close + 1,
                low=lows[i] if lows is not None else max(close - 1, 0.01),
                close=close,
                volume=volumes[i] if volumes is not None else 1_000_000,
            )
        )
    return candles


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FakeProvider(MarketDataProvider):
    """In-memory provider; tickers in `failing` raise ExternalAPIError."""

    def __init__(self):
        self.quotes: dict[str, Quote] = {}
        self.candles: dict[str, list[OHLCV]] = {}
        self.profiles: dict[str, CompanyProfile] = {}
        self.metrics: dict[str, dict] = {}
        self.earnings: dict[str, EarningsEvent] = {}
        self.news: dict[str, list[NewsHeadline]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "Fake"

    def _record(self, method: str, ticker: str) -> None:
        self.calls.append((method, ticker))
        if ticker in self.failing:
            raise ExternalAPIError(self.name, f"{method} failed for {ticker}")

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        self._record("quote", ticker)
        return self.quotes.get(ticker)

    async def get_candles(self, ticker, start, end):
        self._record("candles", ticker)
        return list(self.candles.get(ticker, []))

    async def get_company_profile(self, ticker):
        self._record("profile", ticker)
        return self.profiles.get(ticker)

    async def get_basic_financials(self, ticker):
        self._record("metrics", ticker)
        return self.metrics.get(ticker, {})

    async def get_earnings(self, ticker, start: date, end: date):
        self._record("earnings", ticker)
        return self.earnings.get(ticker)

    async def get_company_news(self, ticker, start: date, end: date):
        self._record("news", ticker)
        return self.news.get(ticker, [])

    def add_ticker(self, ticker: str, candles: list[OHLCV]) -> None:
        """Register history plus a quote at the last close."""
        self.candles[ticker] = candles
        last = candles[-1]
        prev = candles[-2] if len(candles) > 1 else last
        self.quotes[ticker] = Quote(
            current_price=last.close,
            day_change=last.close - prev.close,
            day_change_percent=(last.close - prev.close) / prev.close * 100,
            day_high=last.high,
            day_low=last.low,
        )

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)


@pytest.fixture
def uptrend_closes():
    """250 closes rising 0.5 per day from 100."""
    return [100 + i * 0.5 for i in range(250)]


@pytest.fixture
def uptrend_candles(uptrend_closes):
    return build_candles(uptrend_closes)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def data_service(provider, clock):
    """History service over the fake provider with a memory-only candle cache."""
    end = START + timedelta(days=260)
    return HistoricalDataService(
        provider=provider,
        cache=CandleCache(ttl=3600, clock=clock),
        now=lambda: end,
    )
