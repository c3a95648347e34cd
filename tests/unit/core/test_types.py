"""
core/types.py 테스트

Asset 파싱, 제공자 식별자, 락 순서 확인
"""

import pytest

from core.errors import InvalidRequestError
from core.types import PROVIDER_IDS, Asset, FetchState, PricingMode


class TestAsset:
    """Asset 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert Asset.BTC.value == "BTC"
        assert Asset.ETH.value == "ETH"
        assert Asset.USDT.value == "USDT"

    def test_provider_id(self) -> None:
        """제공자 식별자"""
        assert Asset.BTC.provider_id == "bitcoin"
        assert Asset.ETH.provider_id == "ethereum"
        assert Asset.USDT.provider_id == "tether"

    def test_every_asset_has_provider_id(self) -> None:
        """모든 자산이 매핑됨"""
        assert set(PROVIDER_IDS) == set(Asset)

    def test_ordinal_follows_definition_order(self) -> None:
        """정의 순서 = 락 순서"""
        assert [a.ordinal for a in Asset] == [0, 1, 2]
        assert Asset.BTC.ordinal < Asset.ETH.ordinal < Asset.USDT.ordinal

    @pytest.mark.parametrize("text", ["BTC", "btc", " Btc "])
    def test_parse_case_insensitive(self, text: str) -> None:
        """대소문자 무관 파싱"""
        assert Asset.parse(text) is Asset.BTC

    def test_parse_unknown(self) -> None:
        """지원하지 않는 심볼"""
        with pytest.raises(InvalidRequestError, match="지원하지 않는 자산"):
            Asset.parse("DOGE")

    def test_string_comparison(self) -> None:
        """str 상속으로 문자열 비교 가능"""
        assert Asset.ETH == "ETH"


class TestPricingMode:
    """PricingMode 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert PricingMode("market") is PricingMode.MARKET
        assert PricingMode("fixed") is PricingMode.FIXED


class TestFetchState:
    """FetchState 테스트"""

    def test_all_states(self) -> None:
        """상태 목록"""
        assert {s.value for s in FetchState} == {
            "IDLE",
            "ATTEMPTING",
            "BACKOFF",
            "SUCCEEDED",
            "EXHAUSTED",
            "FAILED",
            "CANCELLED",
        }
