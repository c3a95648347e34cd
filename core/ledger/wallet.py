"""
지갑 (자산별 잔고)

하나의 자산에 대한 음수 불가 잔고 보관.
입금/출금은 지갑 단위 락으로 서로 원자적.
"""

import logging
import threading
from decimal import Decimal

from core.errors import InsufficientFundsError, InvalidRequestError
from core.types import Asset
from core.utils.amounts import to_decimal

logger = logging.getLogger(__name__)


class Wallet:
    """자산별 지갑

    불변식: balance >= 0. 실패한 연산은 상태를 변경하지 않음.

    Args:
        asset: 자산
        balance: 초기 잔고 (기본 0)
    """

    def __init__(self, asset: Asset, balance: Decimal | int | str = Decimal("0")):
        initial = to_decimal(balance)
        if initial < 0:
            raise InvalidRequestError(f"초기 잔고는 음수일 수 없습니다: {initial}")

        self.asset = asset
        self._balance = initial
        # ConversionEngine이 두 지갑을 함께 잠글 수 있도록 재진입 락 사용
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Wallet(asset={self.asset.value}, balance={self.balance})"

    @property
    def balance(self) -> Decimal:
        """현재 잔고"""
        with self._lock:
            return self._balance

    @property
    def lock(self) -> threading.RLock:
        """지갑 락 (여러 지갑을 함께 변경할 때 Asset 순서로 획득)"""
        return self._lock

    def can_cover(self, amount: Decimal) -> bool:
        """잔고가 amount 이상인지 확인"""
        with self._lock:
            return self._balance >= amount

    def deposit(self, amount: Decimal | int | str) -> Decimal:
        """입금

        Args:
            amount: 입금액 (0 이상)

        Returns:
            입금 후 잔고

        Raises:
            InvalidRequestError: 음수 금액
        """
        value = to_decimal(amount)
        if value < 0:
            raise InvalidRequestError(f"입금액은 음수일 수 없습니다: {value}")

        with self._lock:
            self._balance += value
            new_balance = self._balance

        logger.debug(
            f"{self.asset.value} 입금",
            extra={"amount": str(value), "balance": str(new_balance)},
        )
        return new_balance

    def withdraw(self, amount: Decimal | int | str) -> Decimal:
        """출금 (부분 출금 없음)

        Args:
            amount: 출금액 (0 초과)

        Returns:
            출금 후 잔고

        Raises:
            InvalidRequestError: 0 이하 금액
            InsufficientFundsError: 잔고 부족 (잔고 변경 없음)
        """
        value = to_decimal(amount)
        if value <= 0:
            raise InvalidRequestError(f"출금액은 0보다 커야 합니다: {value}")

        with self._lock:
            if self._balance < value:
                raise InsufficientFundsError(self.asset, self._balance, value)
            self._balance -= value
            new_balance = self._balance

        logger.debug(
            f"{self.asset.value} 출금",
            extra={"amount": str(value), "balance": str(new_balance)},
        )
        return new_balance
