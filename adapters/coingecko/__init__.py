"""
CoinGecko 어댑터

공개 시세 API 기반 IQuoteProvider 구현.
"""

from adapters.coingecko.quote_provider import CoinGeckoQuoteProvider

__all__ = [
    "CoinGeckoQuoteProvider",
]
