"""
AccountLedger

한 계정의 자산별 지갑과 수수료 풀을 관리하는 진입점.
세션/CLI 계층과 외부 영속화 계층이 호출.

수수료 정책:
- 입금: 요청액 기준 banking fee 차감 후 입금 (지갑에는 net만 반영)
- 출금: 잔고에서 요청액(gross) 전체 차감, 외부로 나가는 금액은 net
- 환전: 수령 자산 기준 exchange fee 차감
- 모든 수수료는 자산별 수수료 풀에 누적 (소멸되지 않음)
"""

import logging
import threading
from decimal import Decimal
from typing import Awaitable, Callable, Mapping

from core.errors import InvalidRequestError
from core.ledger.conversion import ConversionEngine
from core.ledger.fees import FeeSchedule
from core.ledger.models import (
    ConversionRequest,
    ConversionResult,
    LedgerSnapshot,
    TransferResult,
)
from core.ledger.wallet import Wallet
from core.pricing.fetcher import RateFetcher
from core.pricing.rates import IRateSource
from core.types import Asset
from core.utils.amounts import to_decimal

logger = logging.getLogger(__name__)


ChangeCallback = Callable[[LedgerSnapshot], Awaitable[None]]


class AccountLedger:
    """계정 원장

    Args:
        account_id: 계정 ID
        fee_schedule: 수수료 스케줄
        rate_source: 환전용 환율 소스
        balances: 초기 잔고 (없는 자산은 0)
        on_change: 변경 후 호출되는 콜백 (IAccountStore.save 등)

    사용 예시:
    ```python
    ledger = AccountLedger("alice", FeeSchedule(), FixedRateTable())

    await ledger.deposit(Asset.BTC, Decimal("1"))
    await ledger.convert(ConversionRequest.create("BTC", "ETH", "0.5"))
    ```
    """

    def __init__(
        self,
        account_id: str,
        fee_schedule: FeeSchedule,
        rate_source: IRateSource,
        balances: Mapping[Asset, Decimal | int | str] | None = None,
        on_change: ChangeCallback | None = None,
    ):
        initial = balances or {}
        self.account_id = account_id
        self.fee_schedule = fee_schedule
        self.wallets: dict[Asset, Wallet] = {
            asset: Wallet(asset, initial.get(asset, Decimal("0"))) for asset in Asset
        }
        self.engine = ConversionEngine(self.wallets, fee_schedule, rate_source)

        self._on_change = on_change
        self._collected_fees: dict[Asset, Decimal] = {asset: Decimal("0") for asset in Asset}
        self._fees_lock = threading.Lock()

    @classmethod
    def from_snapshot(
        cls,
        snapshot: LedgerSnapshot,
        fee_schedule: FeeSchedule,
        rate_source: IRateSource,
        on_change: ChangeCallback | None = None,
    ) -> "AccountLedger":
        """저장된 스냅샷에서 복원"""
        ledger = cls(
            account_id=snapshot.account_id,
            fee_schedule=fee_schedule,
            rate_source=rate_source,
            balances=snapshot.balances,
            on_change=on_change,
        )
        for asset, fee in snapshot.collected_fees.items():
            ledger._collected_fees[asset] = to_decimal(fee)
        return ledger

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    def balance(self, asset: Asset) -> Decimal:
        """자산 잔고"""
        return self.wallets[asset].balance

    def balances(self) -> dict[Asset, Decimal]:
        """전체 잔고"""
        return {asset: wallet.balance for asset, wallet in self.wallets.items()}

    def collected_fees(self) -> dict[Asset, Decimal]:
        """자산별 누적 수수료"""
        with self._fees_lock:
            return dict(self._collected_fees)

    def snapshot(self) -> LedgerSnapshot:
        """현재 상태 스냅샷"""
        return LedgerSnapshot(
            account_id=self.account_id,
            balances=self.balances(),
            collected_fees=self.collected_fees(),
        )

    async def total_value_usd(self, fetcher: RateFetcher) -> Decimal:
        """USD 환산 총 자산

        잔고가 있는 자산만 시세 조회. 조회 실패는 그대로 전달.
        """
        held = {asset: bal for asset, bal in self.balances().items() if bal > 0}
        if not held:
            return Decimal("0")

        prices = await fetcher.fetch_many(list(held))
        return sum((bal * prices[asset] for asset, bal in held.items()), Decimal("0"))

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------

    async def deposit(self, asset: Asset, amount: Decimal | int | str) -> TransferResult:
        """입금 (banking fee 차감 후 입금)

        Raises:
            InvalidRequestError: 0 이하 금액
        """
        requested = self._positive(amount, "입금액")
        fee = self.fee_schedule.banking_fee(requested)
        net = requested - fee

        balance = self.wallets[asset].deposit(net)
        self._collect_fee(asset, fee)

        logger.info(
            f"입금 완료: {asset.value}",
            extra={"account_id": self.account_id, "requested": str(requested), "fee": str(fee)},
        )
        await self._notify()

        return TransferResult(asset=asset, requested=requested, fee=fee, net_amount=net, balance=balance)

    async def withdraw(self, asset: Asset, amount: Decimal | int | str) -> TransferResult:
        """출금 (잔고에서 gross 차감, net 지급)

        Raises:
            InvalidRequestError: 0 이하 금액
            InsufficientFundsError: 잔고 부족 (변경 없음)
        """
        requested = self._positive(amount, "출금액")
        fee = self.fee_schedule.banking_fee(requested)
        net = requested - fee

        balance = self.wallets[asset].withdraw(requested)
        self._collect_fee(asset, fee)

        logger.info(
            f"출금 완료: {asset.value}",
            extra={"account_id": self.account_id, "requested": str(requested), "fee": str(fee)},
        )
        await self._notify()

        return TransferResult(asset=asset, requested=requested, fee=fee, net_amount=net, balance=balance)

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        """환전 (ConversionEngine 위임, 수수료는 수령 자산 풀에 누적)"""
        result = await self.engine.convert(request)
        self._collect_fee(result.to_asset, result.fee_charged)
        await self._notify()
        return result

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    @staticmethod
    def _positive(amount: Decimal | int | str, label: str) -> Decimal:
        value = to_decimal(amount)
        if value <= 0:
            raise InvalidRequestError(f"{label}은 0보다 커야 합니다: {value}")
        return value

    def _collect_fee(self, asset: Asset, fee: Decimal) -> None:
        with self._fees_lock:
            self._collected_fees[asset] += fee

    async def _notify(self) -> None:
        """변경 콜백 호출 (변경은 이미 커밋됨, 실패는 로그만)"""
        if self._on_change is None:
            return
        try:
            await self._on_change(self.snapshot())
        except Exception as e:
            logger.warning(
                f"계정 변경 콜백 실패: {e}",
                extra={"account_id": self.account_id},
                exc_info=True,
            )
