"""
Mock 계정 저장소

테스트용 Mock AccountStore.
IAccountStore Protocol 준수.
"""

from core.ledger.models import LedgerSnapshot


class MockAccountStore:
    """Mock 계정 저장소
    
    저장 요청된 모든 스냅샷을 기록하여 테스트에서 검증 가능.
    
    Args:
        should_fail: True면 모든 저장 실패 (에러 시나리오 테스트용)
    """
    
    def __init__(self, should_fail: bool = False):
        self.should_fail = should_fail
        self.snapshots: list[LedgerSnapshot] = []
    
    async def save(self, snapshot: LedgerSnapshot) -> None:
        """스냅샷 저장"""
        if self.should_fail:
            raise OSError("Mock store failure")
        self.snapshots.append(snapshot)
    
    @property
    def last(self) -> LedgerSnapshot | None:
        """마지막 저장 스냅샷"""
        return self.snapshots[-1] if self.snapshots else None
