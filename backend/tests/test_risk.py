import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from stock_advisor.schemas.market import CompanyProfile, EarningsEvent, NewsHeadline, Quote
from stock_advisor.schemas.risk import MarketData, RiskFlag, RiskFlagType, RiskSeverity
from stock_advisor.services.cache.ttl_cache import TTLCache
from stock_advisor.services.risk.assessment import (
    assess_risk_flags,
    assess_sector_concentration,
    calculate_risk_score,
    intraday_volatility,
    is_earnings_within,
    score_headline_sentiment,
)
from stock_advisor.services.risk.service import RiskService

NOW = datetime(2025, 6, 2, 15, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_market_data(**overrides) -> MarketData:
    values = dict(ticker="XYZ", current_price=100.0, last_updated=NOW)
    values.update(overrides)
    return MarketData(**values)


# =============================================================================
# RULES
# =============================================================================


def test_quiet_ticker_has_no_flags():
    flags = assess_risk_flags(make_market_data(volatility_30d=5, share_float=500, pe_ratio=20), None, TODAY)
    assert flags == []
    assert calculate_risk_score(flags) == 0.0


def test_all_rules_fire():
    earnings = EarningsEvent(ticker="XYZ", earnings_date=TODAY + timedelta(days=3))
    market_data = make_market_data(volatility_30d=55, share_float=20, pe_ratio=60)

    flags = assess_risk_flags(market_data, earnings, TODAY)

    assert [f.type for f in flags] == [
        RiskFlagType.EARNINGS,
        RiskFlagType.VOLATILITY,
        RiskFlagType.FLOAT,
        RiskFlagType.NEWS,
    ]
    assert flags[1].severity == RiskSeverity.HIGH
    assert calculate_risk_score(flags) == pytest.approx(0.55)


def test_medium_volatility_band():
    flags = assess_risk_flags(make_market_data(volatility_30d=35), None, TODAY)
    assert len(flags) == 1
    assert flags[0].severity == RiskSeverity.MEDIUM
    assert flags[0].impact == 0.15


def test_unknown_float_is_not_low_float():
    assert assess_risk_flags(make_market_data(share_float=0), None, TODAY) == []


def test_earnings_window_is_symmetric():
    assert is_earnings_within(TODAY - timedelta(days=7), TODAY)
    assert is_earnings_within(TODAY + timedelta(days=7), TODAY)
    assert not is_earnings_within(TODAY + timedelta(days=8), TODAY)


def test_risk_score_capped_at_one():
    flags = [
        RiskFlag(type=RiskFlagType.SECTOR, severity=RiskSeverity.HIGH, description="x", impact=0.6)
        for _ in range(3)
    ]
    assert calculate_risk_score(flags) == 1.0


def test_sector_concentration():
    flags = assess_sector_concentration({"Technology": 7, "Energy": 3}, 10)
    assert len(flags) == 1
    assert flags[0].severity == RiskSeverity.HIGH
    assert "Technology: 70.0%" in flags[0].description

    medium = assess_sector_concentration({"Technology": 5, "Energy": 5}, 10)
    assert [f.severity for f in medium] == [RiskSeverity.MEDIUM, RiskSeverity.MEDIUM]

    assert assess_sector_concentration({}, 0) == []


def test_intraday_volatility():
    quote = Quote(current_price=200.0, day_high=210.0, day_low=190.0)
    assert intraday_volatility(quote) == pytest.approx(10.0)
    assert intraday_volatility(Quote(current_price=50.0)) == 0.0
    assert intraday_volatility(Quote(current_price=50.0, day_high=55.0)) == 0.0


def test_headline_sentiment():
    headlines = ["Stocks rally on strong growth", "Shares drop after earnings miss"]
    assert score_headline_sentiment(headlines) == pytest.approx(0.5)
    assert score_headline_sentiment([]) == 0.0


# =============================================================================
# SERVICE
# =============================================================================


@pytest.fixture
def risk_service(provider, clock):
    return RiskService(
        provider=provider,
        cache=TTLCache(ttl=900, clock=clock),
        now=lambda: NOW,
        batch_size=2,
        batch_pause=0,
    )


def add_company(provider, ticker, sector="Technology", price=100.0, **metrics):
    provider.quotes[ticker] = Quote(
        current_price=price, day_change_percent=1.5, day_high=price * 1.02, day_low=price * 0.98, volume=5000
    )
    provider.profiles[ticker] = CompanyProfile(
        ticker=ticker, sector=sector, market_cap=2500.0, share_outstanding=30.0
    )
    provider.metrics[ticker] = metrics


def test_market_data_with_flags(risk_service, provider):
    add_company(provider, "XYZ", peBasicExclExtraTTM=75.0)
    provider.earnings["XYZ"] = EarningsEvent(ticker="XYZ", earnings_date=date(2025, 6, 5))

    market_data = asyncio.run(risk_service.get_market_data("xyz"))

    assert market_data.ticker == "XYZ"
    assert market_data.volatility_30d == pytest.approx(4.0)
    assert market_data.earnings_date == date(2025, 6, 5)
    assert {f.type for f in market_data.risk_flags} == {
        RiskFlagType.EARNINGS,
        RiskFlagType.FLOAT,
        RiskFlagType.NEWS,
    }
    assert market_data.risk_score == pytest.approx(0.3)


def test_market_data_cached(risk_service, provider, clock):
    add_company(provider, "XYZ")

    asyncio.run(risk_service.get_market_data("XYZ"))
    asyncio.run(risk_service.get_market_data("XYZ"))
    assert provider.count("quote") == 1

    clock.advance(901)
    asyncio.run(risk_service.get_market_data("XYZ"))
    assert provider.count("quote") == 2
    # no earnings found, so nothing was cached for them
    assert risk_service.get_cache_stats() == {"market_data": 1, "earnings": 0}


def test_market_data_failure_returns_none(risk_service, provider):
    add_company(provider, "XYZ")
    provider.failing.add("XYZ")
    assert asyncio.run(risk_service.get_market_data("XYZ")) is None


def test_inverted_day_range_returns_none(risk_service, provider):
    add_company(provider, "XYZ")
    provider.quotes["XYZ"] = Quote(current_price=100.0, day_high=95.0, day_low=105.0)

    assert asyncio.run(risk_service.get_market_data("XYZ")) is None
    assert risk_service.get_cache_stats()["market_data"] == 0


def test_missing_day_low_gives_zero_volatility(risk_service, provider):
    add_company(provider, "XYZ")
    provider.quotes["XYZ"] = Quote(current_price=100.0, day_high=110.0)

    market_data = asyncio.run(risk_service.get_market_data("XYZ"))
    assert market_data.volatility_30d == 0.0


def test_sector_exposure_across_batches(risk_service, provider):
    add_company(provider, "AAA", sector="Technology")
    add_company(provider, "BBB", sector="Technology")
    add_company(provider, "CCC", sector="Energy")

    exposure = asyncio.run(risk_service.get_sector_exposure(["AAA", "BBB", "CCC", "MISSING"]))
    assert exposure == {"Technology": 2, "Energy": 1}


def test_news_sentiment(risk_service, provider):
    provider.news["XYZ"] = [
        NewsHeadline(headline="Analysts upgrade XYZ after profit beat"),
        NewsHeadline(headline="XYZ shares flat"),
    ]
    result = asyncio.run(risk_service.get_news_sentiment("xyz"))
    assert result.news_count == 2
    assert result.sentiment == pytest.approx(1.5)


def test_news_sentiment_failure_is_neutral(risk_service, provider):
    provider.failing.add("XYZ")
    result = asyncio.run(risk_service.get_news_sentiment("XYZ"))
    assert result.sentiment == 0.0
    assert result.news_count == 0
