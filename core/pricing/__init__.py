"""
시세 (Rate Cache & Fetcher)

TTL 기반 시세 캐시, 재시도/백오프 시세 조회기, 환율 소스.
"""

from core.pricing.cache import PriceCacheEntry, RateCache
from core.pricing.fetcher import RateFetcher
from core.pricing.rates import (
    DEFAULT_FIXED_RATES,
    FixedRateTable,
    IRateSource,
    MarketRateSource,
)

__all__ = [
    "PriceCacheEntry",
    "RateCache",
    "RateFetcher",
    "FixedRateTable",
    "MarketRateSource",
    "IRateSource",
    "DEFAULT_FIXED_RATES",
]
