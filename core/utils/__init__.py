"""
유틸리티 패키지

금액 정규화, 타임존 처리 등 공통 유틸리티
"""

from core.utils.amounts import to_decimal
from core.utils.timezone import ensure_utc, now_utc

__all__ = [
    "to_decimal",
    "ensure_utc",
    "now_utc",
]
