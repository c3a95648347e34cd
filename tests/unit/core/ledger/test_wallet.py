"""
Wallet 테스트

잔고 음수 불가, 실패 시 무변경, 동시 출금 원자성
"""

import threading
from decimal import Decimal

import pytest

from core.errors import InsufficientFundsError, InvalidRequestError
from core.ledger.wallet import Wallet
from core.types import Asset


class TestWalletInit:
    """생성"""

    def test_default_zero(self) -> None:
        assert Wallet(Asset.BTC).balance == Decimal("0")

    def test_initial_balance_from_string(self) -> None:
        assert Wallet(Asset.ETH, "1.25").balance == Decimal("1.25")

    def test_negative_initial_balance(self) -> None:
        with pytest.raises(InvalidRequestError):
            Wallet(Asset.BTC, Decimal("-1"))


class TestDeposit:
    """입금"""

    def test_deposit_returns_new_balance(self) -> None:
        wallet = Wallet(Asset.BTC, Decimal("1"))

        assert wallet.deposit(Decimal("0.5")) == Decimal("1.5")
        assert wallet.balance == Decimal("1.5")

    def test_deposit_zero_allowed(self) -> None:
        """0 입금은 허용 (잔고 변화 없음)"""
        wallet = Wallet(Asset.BTC, Decimal("1"))

        assert wallet.deposit(Decimal("0")) == Decimal("1")

    def test_negative_deposit(self) -> None:
        wallet = Wallet(Asset.BTC, Decimal("1"))

        with pytest.raises(InvalidRequestError):
            wallet.deposit(Decimal("-0.1"))
        assert wallet.balance == Decimal("1")


class TestWithdraw:
    """출금"""

    def test_withdraw_returns_new_balance(self) -> None:
        wallet = Wallet(Asset.USDT, Decimal("100"))

        assert wallet.withdraw(Decimal("40")) == Decimal("60")

    def test_withdraw_entire_balance(self) -> None:
        """잔고 전액 출금 → 0"""
        wallet = Wallet(Asset.USDT, Decimal("100"))

        assert wallet.withdraw(Decimal("100")) == Decimal("0")

    def test_insufficient_funds_leaves_balance(self) -> None:
        """잔고 부족 → 예외 + 잔고 그대로"""
        wallet = Wallet(Asset.BTC, Decimal("0.1"))

        with pytest.raises(InsufficientFundsError) as exc_info:
            wallet.withdraw(Decimal("0.5"))

        assert exc_info.value.available == Decimal("0.1")
        assert exc_info.value.required == Decimal("0.5")
        assert wallet.balance == Decimal("0.1")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
    def test_non_positive_withdraw(self, amount: Decimal) -> None:
        wallet = Wallet(Asset.BTC, Decimal("1"))

        with pytest.raises(InvalidRequestError):
            wallet.withdraw(amount)
        assert wallet.balance == Decimal("1")

    def test_can_cover(self) -> None:
        wallet = Wallet(Asset.BTC, Decimal("1"))

        assert wallet.can_cover(Decimal("1"))
        assert not wallet.can_cover(Decimal("1.0001"))


class TestConcurrency:
    """동시성"""

    def test_concurrent_withdrawals_never_go_negative(self) -> None:
        """잔고 10, 1씩 50번 동시 출금 → 정확히 10번 성공"""
        wallet = Wallet(Asset.USDT, Decimal("10"))
        successes: list[Decimal] = []
        failures: list[Exception] = []
        guard = threading.Lock()

        def worker() -> None:
            try:
                wallet.withdraw(Decimal("1"))
                with guard:
                    successes.append(Decimal("1"))
            except InsufficientFundsError as e:
                with guard:
                    failures.append(e)

        threads = [threading.Thread(target=worker) for _ in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(successes) == 10
        assert len(failures) == 40
        assert wallet.balance == Decimal("0")
