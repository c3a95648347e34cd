"""
Mock 시세 제공자

테스트/오프라인 실행용 Mock 시세 제공자.
IQuoteProvider Protocol 준수.
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal

from adapters.errors import ProviderResponseError, ProviderTransportError


@dataclass
class MockQuoteState:
    """Mock 상태 (메모리 내 저장)"""
    
    # 가격 (asset_id -> USD 가격)
    prices: dict[str, Decimal] = field(default_factory=dict)
    
    # 다음 호출들에 순서대로 적용할 결과 (예외 또는 가격)
    scripted: list[Exception | Decimal] = field(default_factory=list)
    
    # 호출 기록 (asset_id 목록)
    calls: list[str] = field(default_factory=list)


class MockQuoteProvider:
    """Mock 시세 제공자
    
    IQuoteProvider Protocol 구현.
    스크립트된 결과를 순서대로 반환하고, 스크립트가 비면 prices를 사용.
    
    사용 예시:
    ```python
    provider = MockQuoteProvider(prices={"bitcoin": Decimal("45000")})
    
    # 두 번 실패 후 성공
    provider.fail_next(ProviderTransportError("timeout"), times=2)
    
    price = await provider.get_price("bitcoin")
    ```
    
    Args:
        prices: 초기 가격
        delay: 호출당 지연 (초)
    """
    
    def __init__(
        self,
        prices: dict[str, Decimal] | None = None,
        delay: float = 0.0,
    ):
        self.state = MockQuoteState(prices=dict(prices or {}))
        self.delay = delay
        
        # 설정 시 호출이 이 이벤트를 기다림 (동시성 테스트용)
        self.gate: asyncio.Event | None = None
    
    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------
    
    def set_price(self, asset_id: str, price: Decimal) -> None:
        """가격 설정"""
        self.state.prices[asset_id] = price
    
    def fail_next(self, error: Exception, times: int = 1) -> None:
        """다음 호출 실패 설정"""
        self.state.scripted.extend([error] * times)
    
    def return_next(self, price: Decimal) -> None:
        """다음 호출 가격 설정"""
        self.state.scripted.append(price)
    
    @property
    def call_count(self) -> int:
        """총 호출 횟수"""
        return len(self.state.calls)
    
    # -------------------------------------------------------------------------
    # IQuoteProvider
    # -------------------------------------------------------------------------
    
    async def get_price(self, asset_id: str) -> Decimal:
        """가격 조회"""
        self.state.calls.append(asset_id)
        
        if self.gate is not None:
            await self.gate.wait()
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        
        if self.state.scripted:
            outcome = self.state.scripted.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        
        if asset_id not in self.state.prices:
            raise ProviderResponseError(f"응답에 '{asset_id}' 가격이 없습니다")
        
        return self.state.prices[asset_id]


class AlwaysFailingQuoteProvider(MockQuoteProvider):
    """항상 전송 에러를 발생시키는 Mock (재시도 소진 시나리오용)"""
    
    async def get_price(self, asset_id: str) -> Decimal:
        self.state.calls.append(asset_id)
        raise ProviderTransportError(f"{asset_id}: connection refused")
