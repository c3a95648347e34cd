"""
Mock 시세 제공자 테스트
"""

from decimal import Decimal

import pytest

from adapters.errors import ProviderResponseError, ProviderTransportError
from adapters.mock.quote_provider import AlwaysFailingQuoteProvider, MockQuoteProvider


class TestMockQuoteProvider:
    """MockQuoteProvider 테스트"""

    @pytest.mark.asyncio
    async def test_returns_configured_price(self) -> None:
        provider = MockQuoteProvider(prices={"bitcoin": Decimal("45000")})

        assert await provider.get_price("bitcoin") == Decimal("45000")
        assert provider.state.calls == ["bitcoin"]

    @pytest.mark.asyncio
    async def test_unknown_asset(self) -> None:
        provider = MockQuoteProvider()

        with pytest.raises(ProviderResponseError):
            await provider.get_price("dogecoin")

    @pytest.mark.asyncio
    async def test_scripted_outcomes_in_order(self) -> None:
        """스크립트 결과 순서대로 적용 후 기본 가격"""
        provider = MockQuoteProvider(prices={"ethereum": Decimal("2250")})
        provider.fail_next(ProviderTransportError("timeout"))
        provider.return_next(Decimal("2300"))

        with pytest.raises(ProviderTransportError):
            await provider.get_price("ethereum")
        assert await provider.get_price("ethereum") == Decimal("2300")
        assert await provider.get_price("ethereum") == Decimal("2250")
        assert provider.call_count == 3

    @pytest.mark.asyncio
    async def test_set_price(self) -> None:
        provider = MockQuoteProvider()
        provider.set_price("tether", Decimal("1"))

        assert await provider.get_price("tether") == Decimal("1")


class TestAlwaysFailingQuoteProvider:
    @pytest.mark.asyncio
    async def test_always_fails(self) -> None:
        provider = AlwaysFailingQuoteProvider()

        for _ in range(3):
            with pytest.raises(ProviderTransportError):
                await provider.get_price("bitcoin")
        assert provider.call_count == 3
