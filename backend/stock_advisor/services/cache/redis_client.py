"""
Redis cache client for historical candle data.

Daily candles change once per session, so a fetched series is reused
for an hour instead of hitting the provider on every analytics request.
"""

import json
import logging
import time
from typing import Optional, List

import redis.asyncio as redis

from stock_advisor.core.config import settings
from stock_advisor.schemas.market import OHLCV
from stock_advisor.services.cache.ttl_cache import Clock, TTLCache

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None


async def init_redis() -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    try:
        _redis_pool = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis connection closed")


class CandleCache:
    """
    Redis-based cache for historical candles.

    Keys:
    - candles:{ticker}:{timeframe} -> JSON list of OHLCV
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        ttl: Optional[int] = None,
        clock: Clock = time.monotonic,
    ):
        self._redis = redis_client
        self.ttl = settings.historical_cache_ttl_seconds if ttl is None else ttl
        # In-memory fallback when Redis is unavailable
        self._memory = TTLCache(ttl=self.ttl, clock=clock)

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    @staticmethod
    def _key(ticker: str, timeframe: str) -> str:
        return f"candles:{ticker.upper()}:{timeframe}"

    async def get_candles(self, ticker: str, timeframe: str) -> Optional[List[OHLCV]]:
        """Get cached candles, None if absent or expired."""
        key = self._key(ticker, timeframe)

        if self.redis:
            try:
                value = await self.redis.get(key)
                if value:
                    return [OHLCV.model_validate(c) for c in json.loads(value)]
                return None
            except Exception as e:
                logger.debug(f"Redis get_candles failed: {e}")

        # Fallback to memory
        return self._memory.get(key)

    async def set_candles(self, ticker: str, timeframe: str, candles: List[OHLCV]) -> bool:
        """Cache candles for a ticker/timeframe."""
        key = self._key(ticker, timeframe)

        if self.redis:
            try:
                value = json.dumps([c.model_dump(mode="json") for c in candles])
                await self.redis.set(key, value, ex=self.ttl or None)
                return True
            except Exception as e:
                logger.debug(f"Redis set_candles failed: {e}")

        self._memory.set(key, candles)
        return True


# Singleton instance
_candle_cache: Optional[CandleCache] = None


def get_candle_cache() -> CandleCache:
    """Get the candle cache singleton."""
    global _candle_cache
    if _candle_cache is None:
        _candle_cache = CandleCache()
    return _candle_cache
