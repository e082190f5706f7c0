"""
Finnhub Data Adapter

REST client for the Finnhub stock API.
Docs: https://finnhub.io/docs/api
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

import aiohttp

from stock_advisor.core.config import settings
from stock_advisor.schemas.market import (
    OHLCV,
    Quote,
    CompanyProfile,
    EarningsEvent,
    NewsHeadline,
)
from stock_advisor.services.base import ExternalAPIError, RateLimitError
from stock_advisor.services.data_ingestion.interface import MarketDataProvider

logger = logging.getLogger(__name__)


def _format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def parse_candles(data: dict, ticker: str) -> list[OHLCV]:
    """
    Convert Finnhub's column-oriented candle payload to OHLCV rows.

    Payload: {"s": "ok", "t": [...], "o": [...], "h": [...], "l": [...], "c": [...], "v": [...]}
    """
    if data.get("s") != "ok" or not data.get("c"):
        raise ExternalAPIError("Finnhub", f"No historical data available for {ticker}")

    return [
        OHLCV(
            timestamp=datetime.fromtimestamp(ts, tz=timezone.utc),
            open=data["o"][i],
            high=data["h"][i],
            low=data["l"][i],
            close=data["c"][i],
            volume=int(data["v"][i]),
        )
        for i, ts in enumerate(data["t"])
    ]


def parse_quote(data: dict) -> Optional[Quote]:
    """Finnhub quote: c, d, dp, h, l, o, pc, t. c == 0 means unknown ticker."""
    if not data or not data.get("c"):
        return None

    return Quote(
        current_price=data["c"],
        day_change=data.get("d") or 0.0,
        day_change_percent=data.get("dp") or 0.0,
        day_high=data.get("h"),
        day_low=data.get("l"),
        open=data.get("o"),
        previous_close=data.get("pc"),
        timestamp=datetime.fromtimestamp(data["t"], tz=timezone.utc) if data.get("t") else None,
    )


class FinnhubProvider(MarketDataProvider):
    """
    Finnhub REST API client.

    One aiohttp session is reused across calls and closed on shutdown.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._api_key = api_key or settings.finnhub_api_key
        self._base_url = (base_url or settings.finnhub_base_url).rstrip("/")
        self._timeout = timeout or settings.http_timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "Finnhub"

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get(self, path: str, params: dict) -> Any:
        """GET a Finnhub endpoint and return decoded JSON."""
        if not self.is_configured:
            raise ExternalAPIError(self.name, "FINNHUB_API_KEY is not configured")

        session = await self._ensure_session()
        url = f"{self._base_url}{path}"

        try:
            async with session.get(url, params={**params, "token": self._api_key}) as resp:
                if resp.status == 429:
                    raise RateLimitError(self.name, f"Rate limit exceeded on {path}")
                if resp.status != 200:
                    raise ExternalAPIError(
                        self.name,
                        f"{path} returned HTTP {resp.status}",
                        {"status": resp.status},
                    )
                return await resp.json()
        except aiohttp.ClientError as e:
            raise ExternalAPIError(self.name, f"{path} request failed: {e}") from e

    # ============ Prices ============

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        data = await self._get("/quote", {"symbol": ticker})
        return parse_quote(data)

    async def get_candles(
        self, ticker: str, start: datetime, end: datetime
    ) -> list[OHLCV]:
        data = await self._get(
            "/stock/candle",
            {
                "symbol": ticker,
                "resolution": "D",
                "from": int(start.timestamp()),
                "to": int(end.timestamp()),
            },
        )
        candles = parse_candles(data, ticker)
        logger.info(f"Fetched {len(candles)} daily candles for {ticker} from Finnhub")
        return candles

    # ============ Reference Data ============

    async def get_company_profile(self, ticker: str) -> Optional[CompanyProfile]:
        data = await self._get("/stock/profile2", {"symbol": ticker})
        if not data:
            return None

        return CompanyProfile(
            ticker=ticker,
            name=data.get("name"),
            sector=data.get("finnhubIndustry") or "Unknown",
            market_cap=data.get("marketCapitalization") or 0.0,
            share_outstanding=data.get("shareOutstanding") or 0.0,
        )

    async def get_basic_financials(self, ticker: str) -> dict:
        data = await self._get("/stock/metric", {"symbol": ticker, "metric": "all"})
        return (data or {}).get("metric") or {}

    async def get_earnings(
        self, ticker: str, start: date, end: date
    ) -> Optional[EarningsEvent]:
        data = await self._get(
            "/calendar/earnings",
            {"symbol": ticker, "from": _format_date(start), "to": _format_date(end)},
        )
        calendar = (data or {}).get("earningsCalendar") or []
        if not calendar:
            return None

        earnings = calendar[0]
        return EarningsEvent(
            ticker=ticker,
            earnings_date=earnings["date"],
            estimate=earnings.get("epsEstimate") or 0.0,
            actual=earnings.get("epsActual"),
            surprise=earnings.get("surprise"),
        )

    async def get_company_news(
        self, ticker: str, start: date, end: date
    ) -> list[NewsHeadline]:
        data = await self._get(
            "/company-news",
            {"symbol": ticker, "from": _format_date(start), "to": _format_date(end)},
        )
        headlines = []
        for article in data or []:
            if not article.get("headline"):
                continue
            headlines.append(
                NewsHeadline(
                    headline=article["headline"],
                    source=article.get("source"),
                    url=article.get("url"),
                    published_at=(
                        datetime.fromtimestamp(article["datetime"], tz=timezone.utc)
                        if article.get("datetime")
                        else None
                    ),
                )
            )
        return headlines

    async def health_check(self) -> bool:
        return self.is_configured
