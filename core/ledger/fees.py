"""
수수료 스케줄

입출금(banking)과 환전(exchange) 수수료율을 보관하는 불변 설정.
수수료는 항상 수수료 차감 전(gross) 금액 기준으로 계산.
"""

from dataclasses import dataclass
from decimal import Decimal

from core.constants import Defaults
from core.errors import InvalidRequestError


@dataclass(frozen=True)
class FeeSchedule:
    """수수료 스케줄 (불변)

    Attributes:
        banking_fee_rate: 입출금 수수료율 [0, 1)
        exchange_fee_rate: 환전 수수료율 [0, 1)
    """

    banking_fee_rate: Decimal = Defaults.BANKING_FEE_RATE
    exchange_fee_rate: Decimal = Defaults.EXCHANGE_FEE_RATE

    def __post_init__(self) -> None:
        for name in ("banking_fee_rate", "exchange_fee_rate"):
            rate = Decimal(str(getattr(self, name)))
            if not (Decimal("0") <= rate < Decimal("1")):
                raise ValueError(f"{name}는 [0, 1) 범위여야 합니다: {rate}")
            # frozen이므로 object.__setattr__ 사용
            object.__setattr__(self, name, rate)

    def banking_fee(self, amount: Decimal) -> Decimal:
        """입출금 수수료 = amount * banking_fee_rate"""
        return _fee(amount, self.banking_fee_rate)

    def exchange_fee(self, amount: Decimal) -> Decimal:
        """환전 수수료 = amount * exchange_fee_rate"""
        return _fee(amount, self.exchange_fee_rate)


def _fee(amount: Decimal, rate: Decimal) -> Decimal:
    if amount < 0:
        raise InvalidRequestError(f"수수료 계산 금액은 음수일 수 없습니다: {amount}")
    return amount * rate
