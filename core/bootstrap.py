"""
런타임 구성

LedgerConfig로부터 시세 제공자 → RateCache → RateFetcher → 환율 소스 →
FeeSchedule을 조립하고 AccountLedger를 생성.
"""

import logging
from dataclasses import dataclass

from adapters.coingecko.quote_provider import CoinGeckoQuoteProvider
from adapters.interfaces import IQuoteProvider
from core.config.loader import LedgerConfig
from core.ledger.account import AccountLedger, ChangeCallback
from core.ledger.fees import FeeSchedule
from core.ledger.models import LedgerSnapshot
from core.pricing.cache import RateCache
from core.pricing.fetcher import RateFetcher
from core.pricing.rates import FixedRateTable, IRateSource, MarketRateSource
from core.types import PricingMode

logger = logging.getLogger(__name__)


@dataclass
class LedgerRuntime:
    """조립된 런타임 구성요소 (프로세스당 하나)"""

    config: LedgerConfig
    provider: IQuoteProvider
    cache: RateCache
    fetcher: RateFetcher
    rate_source: IRateSource
    fee_schedule: FeeSchedule

    def open_account(
        self,
        account_id: str,
        on_change: ChangeCallback | None = None,
    ) -> AccountLedger:
        """빈 계정 원장 생성"""
        return AccountLedger(
            account_id=account_id,
            fee_schedule=self.fee_schedule,
            rate_source=self.rate_source,
            on_change=on_change,
        )

    def restore_account(
        self,
        snapshot: LedgerSnapshot,
        on_change: ChangeCallback | None = None,
    ) -> AccountLedger:
        """스냅샷에서 계정 원장 복원"""
        return AccountLedger.from_snapshot(
            snapshot,
            fee_schedule=self.fee_schedule,
            rate_source=self.rate_source,
            on_change=on_change,
        )

    async def close(self) -> None:
        """제공자 리소스 정리 (close()가 있는 경우만)"""
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()


def build_runtime(
    config: LedgerConfig,
    provider: IQuoteProvider | None = None,
) -> LedgerRuntime:
    """설정에 따라 런타임 조립

    Args:
        config: 로드된 설정
        provider: 시세 제공자 (None이면 CoinGecko)

    Returns:
        LedgerRuntime
    """
    pricing = config.pricing

    if provider is None:
        provider = CoinGeckoQuoteProvider(
            base_url=pricing.coingecko_base_url,
            timeout=pricing.attempt_timeout_seconds,
        )

    cache = RateCache(ttl=pricing.cache_ttl)
    fetcher = RateFetcher(
        provider=provider,
        cache=cache,
        max_attempts=pricing.max_attempts,
        initial_backoff=pricing.initial_backoff_seconds,
        attempt_timeout=pricing.attempt_timeout_seconds,
    )

    rate_source: IRateSource
    if pricing.mode == PricingMode.FIXED:
        rate_source = FixedRateTable()
    else:
        rate_source = MarketRateSource(
            fetcher, allow_stale_fallback=pricing.allow_stale_fallback
        )

    fee_schedule = FeeSchedule(
        banking_fee_rate=config.fees.banking_fee_rate,
        exchange_fee_rate=config.fees.exchange_fee_rate,
    )

    logger.info(
        "런타임 구성 완료",
        extra={
            "pricing_mode": pricing.mode.value,
            "cache_ttl_seconds": pricing.cache_ttl_seconds,
            "banking_fee_rate": str(fee_schedule.banking_fee_rate),
            "exchange_fee_rate": str(fee_schedule.exchange_fee_rate),
        },
    )

    return LedgerRuntime(
        config=config,
        provider=provider,
        cache=cache,
        fetcher=fetcher,
        rate_source=rate_source,
        fee_schedule=fee_schedule,
    )
