"""
Live analytics check against Finnhub.
Run with: python check_api.py [TICKER ...]

Needs FINNHUB_API_KEY in backend/.env.
"""

import asyncio
import os
import sys

# Set working directory
backend_dir = os.path.dirname(os.path.abspath(__file__))
os.chdir(backend_dir)
sys.path.insert(0, backend_dir)

from dotenv import load_dotenv
load_dotenv(os.path.join(backend_dir, ".env"))


async def check_api(tickers: list[str]):
    """Run the analytics pipeline end to end for a few tickers."""
    print("\n" + "=" * 60)
    print("STOCK ADVISOR PRO - ANALYTICS CHECK")
    print("=" * 60)

    from stock_advisor.schemas.market import Timeframe
    from stock_advisor.services.analytics import get_market_analytics_service

    service = get_market_analytics_service()

    # Test 1: Health check
    print("\n[1] Testing Health Check...")
    print("-" * 40)
    is_healthy = await service.health_check()
    print(f"Provider configured: {is_healthy}")

    # Test 2: Batch analytics
    print("\n[2] Testing Batch Analytics...")
    print("-" * 40)
    batch = await service.get_batch_analytics(tickers, Timeframe.Y1)
    print(f"Errors: {batch.errors}")

    for ticker, analytics in batch.results.items():
        technicals = analytics.technicals
        print(f"\n{ticker}:")
        print(f"  Price: ${analytics.current_price:.2f} ({analytics.price_change.percentage:+.2f}%)")
        print(f"  Candles: {len(analytics.chart_data)}")
        print(f"  SMA20/50/200: {technicals.sma20:.2f} / {technicals.sma50:.2f} / {technicals.sma200:.2f}")
        print(f"  RSI14: {technicals.rsi14:.1f}  ATR14: {technicals.atr14:.2f}")
        print(f"  Trend: {analytics.trend.direction.value} ({analytics.trend.duration})")
        print(f"  Volatility: {analytics.volatility.current:.2%} [{analytics.volatility.ranking.value}]")
        print(f"  Support: {analytics.support}  Resistance: {analytics.resistance}")
        for signal in analytics.signals:
            print(f"  Signal: {signal.type.value} {signal.indicator} ({signal.strength})")

    await service.data_service.provider.close()

    print("\n" + "=" * 60)
    print("ANALYTICS CHECK COMPLETE")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(check_api(sys.argv[1:] or ["AAPL", "MSFT"]))
