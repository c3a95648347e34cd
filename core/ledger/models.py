"""
Ledger 데이터 모델

환전 요청/결과, 입출금 결과, 계정 스냅샷.
모든 금액은 Decimal 타입 사용.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from core.errors import InvalidRequestError
from core.types import Asset
from core.utils.amounts import to_decimal


@dataclass(frozen=True)
class ConversionRequest:
    """환전 요청 (불변)

    Attributes:
        from_asset: 출금 자산
        to_asset: 입금 자산
        amount: 환전할 출금 자산 수량 (0 초과)
    """

    from_asset: Asset
    to_asset: Asset
    amount: Decimal

    def __post_init__(self) -> None:
        for name in ("from_asset", "to_asset"):
            value = getattr(self, name)
            if not isinstance(value, Asset):
                object.__setattr__(self, name, Asset.parse(str(value)))

        amount = to_decimal(self.amount)
        if self.from_asset == self.to_asset:
            raise InvalidRequestError(
                f"동일 자산 간 환전은 불가능합니다: {self.from_asset.value}"
            )
        if amount <= 0:
            raise InvalidRequestError(f"환전 수량은 0보다 커야 합니다: {amount}")
        object.__setattr__(self, "amount", amount)

    @classmethod
    def create(
        cls,
        from_asset: str | Asset,
        to_asset: str | Asset,
        amount: Decimal | int | str,
    ) -> "ConversionRequest":
        """ConversionRequest 생성 헬퍼

        Enum 또는 문자열 모두 허용
        """
        return cls(from_asset=from_asset, to_asset=to_asset, amount=to_decimal(amount))  # type: ignore[arg-type]


@dataclass(frozen=True)
class ConversionResult:
    """환전 결과

    Attributes:
        from_asset: 출금 자산
        to_asset: 입금 자산
        debited: 출금 자산에서 차감된 수량
        credited: 입금 자산에 더해진 수량 (수수료 차감 후)
        effective_rate: 적용 환율 (to_asset / from_asset 1단위)
        fee_charged: 환전 수수료 (to_asset 단위)
        gross_received: 수수료 차감 전 수령액
    """

    from_asset: Asset
    to_asset: Asset
    debited: Decimal
    credited: Decimal
    effective_rate: Decimal
    fee_charged: Decimal
    gross_received: Decimal


@dataclass(frozen=True)
class TransferResult:
    """입출금 결과

    Attributes:
        asset: 자산
        requested: 요청 금액 (gross)
        fee: 입출금 수수료
        net_amount: 실제 이동한 금액 (requested - fee)
        balance: 처리 후 잔고
    """

    asset: Asset
    requested: Decimal
    fee: Decimal
    net_amount: Decimal
    balance: Decimal


@dataclass(frozen=True)
class LedgerSnapshot:
    """계정 스냅샷 (외부 저장소 전달용)

    Attributes:
        account_id: 계정 ID
        balances: 자산별 잔고
        collected_fees: 자산별 누적 수수료
    """

    account_id: str
    balances: dict[Asset, Decimal] = field(default_factory=dict)
    collected_fees: dict[Asset, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용, Decimal은 문자열)"""
        return {
            "account_id": self.account_id,
            "balances": {a.value: str(v) for a, v in self.balances.items()},
            "collected_fees": {a.value: str(v) for a, v in self.collected_fees.items()},
        }
