"""
Mock 계정 저장소 테스트
"""

from decimal import Decimal

import pytest

from adapters.mock.account_store import MockAccountStore
from core.ledger.models import LedgerSnapshot
from core.types import Asset


class TestMockAccountStore:
    """MockAccountStore 테스트"""

    @pytest.mark.asyncio
    async def test_records_snapshots(self) -> None:
        store = MockAccountStore()
        snapshot = LedgerSnapshot("alice", balances={Asset.BTC: Decimal("1")})

        await store.save(snapshot)

        assert store.snapshots == [snapshot]
        assert store.last is snapshot

    def test_last_when_empty(self) -> None:
        assert MockAccountStore().last is None

    @pytest.mark.asyncio
    async def test_should_fail(self) -> None:
        store = MockAccountStore(should_fail=True)

        with pytest.raises(OSError):
            await store.save(LedgerSnapshot("alice"))
        assert store.snapshots == []
