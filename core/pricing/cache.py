"""
시세 캐시

자산별 (가격, 조회 시각) 보관 및 TTL 기반 만료 판정.
프로세스 전역 상태를 명시적 인스턴스로 캡슐화하고 clock을 주입받음.

- put만 상태를 변경 (읽기는 변경하지 않음)
- 만료 항목은 삭제하지 않고 다음 put으로 덮어씀
- 락은 네트워크 호출 동안 보유하지 않음
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

from core.constants import Defaults
from core.types import Asset
from core.utils.amounts import to_decimal
from core.utils.timezone import ensure_utc, now_utc

logger = logging.getLogger(__name__)


DEFAULT_TTL = timedelta(seconds=Defaults.CACHE_TTL_SEC)


@dataclass(frozen=True)
class PriceCacheEntry:
    """캐시 항목 (불변)

    Attributes:
        asset: 자산
        price: USD 가격 (0 초과)
        fetched_at: 조회 시각 (UTC)
    """

    asset: Asset
    price: Decimal
    fetched_at: datetime

    def age(self, now: datetime) -> timedelta:
        """now 기준 경과 시간"""
        return ensure_utc(now) - self.fetched_at


class RateCache:
    """시세 캐시

    Args:
        ttl: 캐시 유효 시간 (기본 5분)
        clock: 현재 시각 함수 (기본 now_utc, 테스트에서 교체)

    사용 예시:
    ```python
    cache = RateCache(ttl=timedelta(minutes=5))
    cache.put(Asset.BTC, Decimal("45000"))

    entry = cache.get(Asset.BTC)
    if not cache.is_stale(entry):
        price = entry.price
    ```
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = now_utc,
    ):
        if ttl <= timedelta(0):
            raise ValueError(f"ttl은 0보다 커야 합니다: {ttl}")

        self.ttl = ttl
        self._clock = clock
        self._entries: dict[Asset, PriceCacheEntry] = {}
        self._lock = threading.Lock()

    def now(self) -> datetime:
        """주입된 clock 기준 현재 시각 (UTC)"""
        return ensure_utc(self._clock())

    def get(self, asset: Asset) -> PriceCacheEntry | None:
        """캐시 항목 조회 (만료 여부와 무관)"""
        with self._lock:
            return self._entries.get(asset)

    def put(
        self,
        asset: Asset,
        price: Decimal | int | str,
        now: datetime | None = None,
    ) -> PriceCacheEntry:
        """캐시 항목 저장 (기존 항목 덮어씀)

        Args:
            asset: 자산
            price: USD 가격 (0 초과)
            now: 조회 시각 (None이면 clock 사용)

        Returns:
            저장된 항목

        Raises:
            ValueError: 0 이하 가격
        """
        value = to_decimal(price)
        if value <= 0:
            raise ValueError(f"가격은 0보다 커야 합니다: {asset.value}={value}")

        entry = PriceCacheEntry(
            asset=asset,
            price=value,
            fetched_at=ensure_utc(now) if now is not None else self.now(),
        )

        with self._lock:
            self._entries[asset] = entry

        logger.debug(
            f"시세 캐시 갱신: {asset.value}",
            extra={"price": str(value), "fetched_at": entry.fetched_at.isoformat()},
        )
        return entry

    def is_stale(
        self,
        entry: PriceCacheEntry | None,
        now: datetime | None = None,
        ttl: timedelta | None = None,
    ) -> bool:
        """만료 여부 확인

        항목이 없거나 now - fetched_at >= ttl 이면 만료.
        """
        if entry is None:
            return True

        current = ensure_utc(now) if now is not None else self.now()
        return entry.age(current) >= (ttl if ttl is not None else self.ttl)

    def get_fresh(self, asset: Asset, now: datetime | None = None) -> PriceCacheEntry | None:
        """만료되지 않은 항목만 반환"""
        entry = self.get(asset)
        if self.is_stale(entry, now):
            return None
        return entry

    def snapshot(self) -> dict[Asset, PriceCacheEntry]:
        """전체 캐시 복사본 (표시/진단용)"""
        with self._lock:
            return dict(self._entries)
