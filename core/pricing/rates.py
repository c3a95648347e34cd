"""
환율 소스

환전 시 적용할 환율 결정.
- FixedRateTable: 고정 환율표 (역방향은 1 / 정방향)
- MarketRateSource: 자산별 USD 시세로 교차 환율 계산
"""

import asyncio
import logging
from decimal import Decimal
from typing import Mapping, Protocol

from core.errors import (
    FetchExhaustedError,
    InvalidResponseError,
    RateUnavailableError,
)
from core.pricing.fetcher import RateFetcher
from core.types import Asset

logger = logging.getLogger(__name__)


class IRateSource(Protocol):
    """환율 소스 Protocol (ConversionEngine 의존성)"""

    async def get_rate(self, from_asset: Asset, to_asset: Asset) -> Decimal:
        """from_asset 1단위당 to_asset 수량"""
        ...


# 정방향 고정 환율 (역방향은 별도 항목이 없으면 역수)
DEFAULT_FIXED_RATES: dict[tuple[Asset, Asset], Decimal] = {
    (Asset.BTC, Asset.ETH): Decimal("20"),
    (Asset.BTC, Asset.USDT): Decimal("45000"),
    (Asset.ETH, Asset.BTC): Decimal("0.05"),
    (Asset.ETH, Asset.USDT): Decimal("2250"),
}


class FixedRateTable:
    """고정 환율표

    Args:
        rates: (from, to) → 환율. None이면 DEFAULT_FIXED_RATES
    """

    def __init__(self, rates: Mapping[tuple[Asset, Asset], Decimal] | None = None):
        table = dict(DEFAULT_FIXED_RATES if rates is None else rates)
        for (from_asset, to_asset), rate in table.items():
            if from_asset == to_asset:
                raise ValueError(f"동일 자산 환율은 정의할 수 없습니다: {from_asset.value}")
            if rate <= 0:
                raise ValueError(
                    f"환율은 0보다 커야 합니다: {from_asset.value}→{to_asset.value}={rate}"
                )
        self._rates = table

    def rate(self, from_asset: Asset, to_asset: Asset) -> Decimal:
        """환율 조회

        Raises:
            RateUnavailableError: 정방향/역방향 모두 없는 통화쌍
        """
        forward = self._rates.get((from_asset, to_asset))
        if forward is not None:
            return forward

        reverse = self._rates.get((to_asset, from_asset))
        if reverse is not None:
            return Decimal("1") / reverse

        raise RateUnavailableError(from_asset, to_asset, "환율표에 없는 통화쌍")

    async def get_rate(self, from_asset: Asset, to_asset: Asset) -> Decimal:
        return self.rate(from_asset, to_asset)


class MarketRateSource:
    """시세 기반 교차 환율

    rate = price(from) / price(to)  (두 가격 모두 USD 기준)

    Args:
        fetcher: 시세 조회기
        allow_stale_fallback: 조회 실패 시 만료된 캐시 가격 사용 여부 (기본 False)
    """

    def __init__(self, fetcher: RateFetcher, allow_stale_fallback: bool = False):
        self.fetcher = fetcher
        self.allow_stale_fallback = allow_stale_fallback

    async def get_rate(self, from_asset: Asset, to_asset: Asset) -> Decimal:
        """교차 환율 조회

        Raises:
            RateUnavailableError: 시세 조회 실패 (재시도 소진/잘못된 응답)
            FetchCancelledError: 시세 조회 취소 (그대로 전달)
        """
        price_from, price_to = await asyncio.gather(
            self._price(from_asset, from_asset, to_asset),
            self._price(to_asset, from_asset, to_asset),
        )
        return price_from / price_to

    async def _price(self, asset: Asset, from_asset: Asset, to_asset: Asset) -> Decimal:
        try:
            return await self.fetcher.fetch_with_retry(asset)
        except (FetchExhaustedError, InvalidResponseError) as e:
            if self.allow_stale_fallback:
                stale = self.fetcher.last_known_price(asset)
                if stale is not None:
                    logger.warning(
                        f"만료된 캐시 가격 사용: {asset.value}",
                        extra={"price": str(stale), "error": str(e)},
                    )
                    return stale
            raise RateUnavailableError(from_asset, to_asset, str(e)) from e
