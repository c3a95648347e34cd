"""
계정 원장 (Ledger Core)

자산별 지갑, 수수료 스케줄, 환전 엔진.

사용 예시:
```python
from core.ledger import AccountLedger, ConversionRequest, FeeSchedule
from core.pricing import FixedRateTable

ledger = AccountLedger("alice", FeeSchedule(), FixedRateTable())

# 입금 (0.2% banking fee 차감)
await ledger.deposit(Asset.BTC, Decimal("1"))

# 환전 (0.5% exchange fee 차감)
result = await ledger.convert(ConversionRequest.create("BTC", "ETH", "0.5"))
```
"""

from core.ledger.account import AccountLedger
from core.ledger.conversion import ConversionEngine
from core.ledger.fees import FeeSchedule
from core.ledger.models import (
    ConversionRequest,
    ConversionResult,
    LedgerSnapshot,
    TransferResult,
)
from core.ledger.wallet import Wallet

__all__ = [
    # 핵심 클래스
    "AccountLedger",
    "ConversionEngine",
    "FeeSchedule",
    "Wallet",
    # 모델
    "ConversionRequest",
    "ConversionResult",
    "LedgerSnapshot",
    "TransferResult",
]
