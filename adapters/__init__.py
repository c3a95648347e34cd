"""
어댑터 레이어

외부 서비스(시세 제공자, 계정 저장소)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.errors import (
    ProviderError,
    ProviderResponseError,
    ProviderTransportError,
)
from adapters.interfaces import IAccountStore, IQuoteProvider

__all__ = [
    # Interfaces
    "IQuoteProvider",
    "IAccountStore",
    # Errors
    "ProviderError",
    "ProviderTransportError",
    "ProviderResponseError",
]
