"""
core/errors.py 테스트
"""

from decimal import Decimal

from core.errors import (
    FetchCancelledError,
    FetchError,
    FetchExhaustedError,
    InsufficientFundsError,
    InvalidResponseError,
    LedgerError,
    RateUnavailableError,
    TransientFetchError,
)
from core.types import Asset


class TestHierarchy:
    """예외 계층"""

    def test_fetch_errors(self) -> None:
        assert issubclass(TransientFetchError, FetchError)
        assert issubclass(FetchExhaustedError, FetchError)
        assert issubclass(InvalidResponseError, FetchError)
        assert issubclass(FetchError, LedgerError)

    def test_cancelled_is_not_fetch_error(self) -> None:
        """취소는 재시도 소진과 구분"""
        assert not issubclass(FetchCancelledError, FetchError)
        assert issubclass(FetchCancelledError, LedgerError)


class TestAttributes:
    """예외 속성"""

    def test_insufficient_funds(self) -> None:
        error = InsufficientFundsError(Asset.BTC, Decimal("0.1"), Decimal("0.5"))

        assert error.asset is Asset.BTC
        assert error.available == Decimal("0.1")
        assert error.required == Decimal("0.5")
        assert "BTC" in str(error)

    def test_exhausted(self) -> None:
        cause = TransientFetchError(Asset.ETH, "timeout")
        error = FetchExhaustedError(Asset.ETH, 3, cause)

        assert error.attempts == 3
        assert error.last_error is cause
        assert "3회" in str(error)

    def test_rate_unavailable(self) -> None:
        error = RateUnavailableError(Asset.BTC, Asset.USDT, "down")

        assert error.reason == "down"
        assert "BTC→USDT" in str(error)
