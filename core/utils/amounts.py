"""
금액 유틸리티

모든 금액/가격은 Decimal 사용 (float 금지).
"""

from decimal import Decimal, InvalidOperation

from core.errors import InvalidRequestError


def to_decimal(value: Decimal | int | str) -> Decimal:
    """금액을 Decimal로 정규화

    float는 이진 오차가 섞이므로 거부.

    Raises:
        InvalidRequestError: 변환 불가 값, float, NaN/Infinity
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or isinstance(value, float):
        raise InvalidRequestError(f"금액은 Decimal/int/str만 허용됩니다: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise InvalidRequestError(f"금액 형식이 올바르지 않습니다: {value!r}") from e

    if not result.is_finite():
        raise InvalidRequestError(f"금액은 유한한 값이어야 합니다: {value!r}")
    return result
