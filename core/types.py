"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum

from core.errors import InvalidRequestError


class Asset(str, Enum):
    """지원 자산

    정의 순서가 곧 전역 락 획득 순서 (두 지갑을 동시에 잠글 때 사용).
    """

    BTC = "BTC"
    ETH = "ETH"
    USDT = "USDT"

    @property
    def provider_id(self) -> str:
        """시세 제공자용 소문자 식별자 (예: bitcoin)"""
        return PROVIDER_IDS[self]

    @property
    def ordinal(self) -> int:
        """정의 순서 (락 순서용)"""
        return list(Asset).index(self)

    @classmethod
    def parse(cls, text: str) -> "Asset":
        """심볼 문자열을 Asset으로 변환 (대소문자 무관)

        Raises:
            InvalidRequestError: 지원하지 않는 심볼
        """
        try:
            return cls(text.strip().upper())
        except ValueError as e:
            valid = [a.value for a in cls]
            raise InvalidRequestError(
                f"지원하지 않는 자산입니다: '{text}'. 유효한 값: {valid}"
            ) from e


# 자산 → 시세 제공자 식별자 (CoinGecko coin id)
PROVIDER_IDS: dict[Asset, str] = {
    Asset.BTC: "bitcoin",
    Asset.ETH: "ethereum",
    Asset.USDT: "tether",
}


class PricingMode(str, Enum):
    """환율 결정 방식"""

    MARKET = "market"  # 실시간 시세 기반 교차 환율
    FIXED = "fixed"  # 고정 환율표


class FetchState(str, Enum):
    """시세 조회 재시도 루프 상태"""

    IDLE = "IDLE"
    ATTEMPTING = "ATTEMPTING"
    BACKOFF = "BACKOFF"
    SUCCEEDED = "SUCCEEDED"
    EXHAUSTED = "EXHAUSTED"
    FAILED = "FAILED"  # 재시도 불가 (잘못된 응답)
    CANCELLED = "CANCELLED"
