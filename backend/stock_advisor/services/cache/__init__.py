"""
Cache module for Stock Advisor.

Provides an in-process TTL cache and Redis caching for historical candles.
"""

from stock_advisor.services.cache.ttl_cache import TTLCache
from stock_advisor.services.cache.redis_client import (
    CandleCache,
    get_candle_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "TTLCache",
    "CandleCache",
    "get_candle_cache",
    "init_redis",
    "close_redis",
]
