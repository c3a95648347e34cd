"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from core.ledger.models import LedgerSnapshot


@runtime_checkable
class IQuoteProvider(Protocol):
    """시세 제공자 인터페이스
    
    시도당 한 번의 호출. 가격은 반드시 Decimal 타입 사용.
    """
    
    async def get_price(self, asset_id: str) -> Decimal:
        """자산의 USD 가격 조회
        
        Args:
            asset_id: 제공자 기준 소문자 자산 ID (예: bitcoin)
            
        Returns:
            USD 가격 (0 초과)
            
        Raises:
            ProviderTransportError: 전송/가용성 에러 (재시도 대상)
            ProviderResponseError: 응답 형식 에러 (재시도하지 않음)
        """
        ...


@runtime_checkable
class IAccountStore(Protocol):
    """계정 저장소 인터페이스
    
    외부 영속화 계층이 구현. 각 변경 후 스냅샷을 받아 저장.
    """
    
    async def save(self, snapshot: "LedgerSnapshot") -> None:
        """계정 스냅샷 저장"""
        ...
