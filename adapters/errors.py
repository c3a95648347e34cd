"""
외부 시세 제공자 에러

재시도 정책의 기준이 되는 두 가지 분류:
- ProviderTransportError: 전송/가용성 문제 (재시도 대상)
- ProviderResponseError: 스키마/파싱 문제 (재시도하지 않음)
"""


class ProviderError(Exception):
    """시세 제공자 에러 베이스"""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ProviderTransportError(ProviderError):
    """전송 계층 에러 (연결 실패, 타임아웃, 429, 5xx)"""

    pass


class ProviderResponseError(ProviderError):
    """응답 형식 에러 (잘못된 JSON, 누락된 필드, 0 이하 가격)"""

    pass
