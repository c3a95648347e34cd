"""
환율 소스 테스트

FixedRateTable 정방향/역방향, MarketRateSource 교차 환율 및 실패 처리
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from adapters.errors import ProviderResponseError
from adapters.mock.quote_provider import AlwaysFailingQuoteProvider, MockQuoteProvider
from core.errors import RateUnavailableError
from core.pricing.cache import RateCache
from core.pricing.fetcher import RateFetcher
from core.pricing.rates import DEFAULT_FIXED_RATES, FixedRateTable, MarketRateSource
from core.types import Asset


class TestFixedRateTable:
    """고정 환율표"""

    def test_forward_rate(self) -> None:
        table = FixedRateTable()

        assert table.rate(Asset.BTC, Asset.ETH) == Decimal("20")
        assert table.rate(Asset.ETH, Asset.USDT) == Decimal("2250")

    def test_explicit_reverse_entry_wins(self) -> None:
        """ETH→BTC는 별도 항목 사용"""
        assert FixedRateTable().rate(Asset.ETH, Asset.BTC) == Decimal("0.05")

    def test_reverse_is_reciprocal(self) -> None:
        """USDT→BTC = 1 / 45000"""
        rate = FixedRateTable().rate(Asset.USDT, Asset.BTC)

        assert rate == Decimal("1") / Decimal("45000")

    def test_missing_pair(self) -> None:
        table = FixedRateTable({(Asset.BTC, Asset.ETH): Decimal("20")})

        with pytest.raises(RateUnavailableError):
            table.rate(Asset.BTC, Asset.USDT)

    def test_rejects_non_positive_rate(self) -> None:
        with pytest.raises(ValueError):
            FixedRateTable({(Asset.BTC, Asset.ETH): Decimal("0")})

    def test_rejects_same_asset_pair(self) -> None:
        with pytest.raises(ValueError):
            FixedRateTable({(Asset.BTC, Asset.BTC): Decimal("1")})

    def test_default_table_not_shared(self) -> None:
        """기본 환율표 원본은 변경되지 않음"""
        FixedRateTable()

        assert DEFAULT_FIXED_RATES[(Asset.BTC, Asset.ETH)] == Decimal("20")

    @pytest.mark.asyncio
    async def test_get_rate(self) -> None:
        assert await FixedRateTable().get_rate(Asset.BTC, Asset.USDT) == Decimal("45000")


@pytest.fixture
def cache(fake_clock) -> RateCache:
    return RateCache(ttl=timedelta(minutes=5), clock=fake_clock)


class TestMarketRateSource:
    """시세 기반 교차 환율"""

    @pytest.mark.asyncio
    async def test_cross_rate(self, cache: RateCache, recording_sleep) -> None:
        """BTC→ETH = 45000 / 2250 = 20"""
        provider = MockQuoteProvider(
            prices={"bitcoin": Decimal("45000"), "ethereum": Decimal("2250")}
        )
        source = MarketRateSource(RateFetcher(provider, cache, sleep=recording_sleep))

        assert await source.get_rate(Asset.BTC, Asset.ETH) == Decimal("20")
        assert await source.get_rate(Asset.ETH, Asset.BTC) == Decimal("0.05")
        # 두 번째 조회는 캐시 사용
        assert provider.call_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_becomes_rate_unavailable(
        self, cache: RateCache, recording_sleep
    ) -> None:
        source = MarketRateSource(
            RateFetcher(AlwaysFailingQuoteProvider(), cache, sleep=recording_sleep)
        )

        with pytest.raises(RateUnavailableError) as exc_info:
            await source.get_rate(Asset.BTC, Asset.USDT)

        assert exc_info.value.from_asset is Asset.BTC
        assert exc_info.value.to_asset is Asset.USDT

    @pytest.mark.asyncio
    async def test_invalid_response_becomes_rate_unavailable(
        self, cache: RateCache, recording_sleep
    ) -> None:
        provider = MockQuoteProvider(prices={"bitcoin": Decimal("45000")})
        source = MarketRateSource(RateFetcher(provider, cache, sleep=recording_sleep))

        # ethereum 가격 없음 → ProviderResponseError
        with pytest.raises(RateUnavailableError):
            await source.get_rate(Asset.BTC, Asset.ETH)

    @pytest.mark.asyncio
    async def test_no_stale_fallback_by_default(
        self, cache: RateCache, fake_clock, recording_sleep
    ) -> None:
        """만료 가격은 명시적으로 허용하지 않으면 사용하지 않음"""
        cache.put(Asset.BTC, Decimal("44000"))
        cache.put(Asset.ETH, Decimal("2200"))
        fake_clock.advance(600)
        source = MarketRateSource(
            RateFetcher(AlwaysFailingQuoteProvider(), cache, sleep=recording_sleep)
        )

        with pytest.raises(RateUnavailableError):
            await source.get_rate(Asset.BTC, Asset.ETH)

    @pytest.mark.asyncio
    async def test_stale_fallback_opt_in(
        self, cache: RateCache, fake_clock, recording_sleep
    ) -> None:
        cache.put(Asset.BTC, Decimal("44000"))
        cache.put(Asset.ETH, Decimal("2200"))
        fake_clock.advance(600)
        source = MarketRateSource(
            RateFetcher(AlwaysFailingQuoteProvider(), cache, sleep=recording_sleep),
            allow_stale_fallback=True,
        )

        assert await source.get_rate(Asset.BTC, Asset.ETH) == Decimal("20")

    @pytest.mark.asyncio
    async def test_stale_fallback_without_history(
        self, cache: RateCache, recording_sleep
    ) -> None:
        """캐시 이력이 없으면 허용해도 실패"""
        provider = MockQuoteProvider()
        provider.fail_next(ProviderResponseError("bad"), times=2)
        source = MarketRateSource(
            RateFetcher(provider, cache, sleep=recording_sleep),
            allow_stale_fallback=True,
        )

        with pytest.raises(RateUnavailableError):
            await source.get_rate(Asset.ETH, Asset.USDT)
