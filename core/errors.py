"""
Ledger 에러 정의

모든 실패는 타입이 있는 예외로 호출자에게 전달.
실패 경로에서는 어떤 잔고도 부분적으로 변경되지 않음.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.types import Asset


class LedgerError(Exception):
    """Ledger 에러 베이스"""

    pass


class InvalidRequestError(LedgerError):
    """잘못된 요청 (0/음수 금액, 동일 자산 간 환전 등)

    재시도하지 않고 즉시 호출자에게 전달.
    """

    pass


class InsufficientFundsError(LedgerError):
    """잔고 부족

    검증 시점 또는 커밋 시점(경합)에 발생. 상태 변경 없음.
    """

    def __init__(self, asset: "Asset", available: Decimal, required: Decimal):
        self.asset = asset
        self.available = available
        self.required = required
        super().__init__(
            f"{asset.value} 잔고 부족: 보유 {available}, 필요 {required}"
        )


class RateUnavailableError(LedgerError):
    """환율 결정 실패

    시세 조회 재시도 소진 또는 잘못된 응답을 감싸서 전달.
    원인 예외는 __cause__ 로 연결.
    """

    def __init__(self, from_asset: "Asset", to_asset: "Asset", reason: str):
        self.from_asset = from_asset
        self.to_asset = to_asset
        self.reason = reason
        super().__init__(
            f"환율 조회 불가 ({from_asset.value}→{to_asset.value}): {reason}"
        )


class FetchError(LedgerError):
    """시세 조회 에러 베이스"""

    def __init__(self, asset: "Asset", message: str):
        self.asset = asset
        self.message = message
        super().__init__(f"[{asset.value}] {message}")


class TransientFetchError(FetchError):
    """일시적 실패 (네트워크/타임아웃)

    재시도 루프 내부에서만 사용. 재시도 소진 전에는 호출자에게 보이지 않음.
    """

    pass


class FetchExhaustedError(FetchError):
    """재시도 소진"""

    def __init__(self, asset: "Asset", attempts: int, last_error: Exception | None = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            asset,
            f"{attempts}회 시도 후 시세 조회 실패: {last_error}",
        )


class InvalidResponseError(FetchError):
    """잘못된 시세 응답 (재시도하지 않음)"""

    pass


class FetchCancelledError(LedgerError):
    """시세 조회 취소

    재시도 소진(FetchExhaustedError)과 구분하기 위한 별도 타입.
    """

    def __init__(self, asset: "Asset", attempts: int):
        self.asset = asset
        self.attempts = attempts
        super().__init__(f"[{asset.value}] 시세 조회 취소됨 ({attempts}회 시도 후)")
