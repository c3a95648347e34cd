"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class CoinGeckoEndpoints:
    """CoinGecko API 엔드포인트 (고정값)

    공식 문서: https://docs.coingecko.com/reference/simple-price
    """

    BASE_URL: str = "https://api.coingecko.com/api/v3"
    SIMPLE_PRICE_PATH: str = "/simple/price"
    VS_CURRENCY: str = "usd"


class Defaults:
    """기본값 상수"""

    ACCOUNT_ID: str = "main"

    # 수수료 (0.2% / 0.5%)
    BANKING_FEE_RATE: Decimal = Decimal("0.002")
    EXCHANGE_FEE_RATE: Decimal = Decimal("0.005")

    # 시세 캐시
    CACHE_TTL_SEC: int = 300


class RetryDefaults:
    """시세 조회 재시도 기본값"""

    MAX_ATTEMPTS: int = 3
    INITIAL_BACKOFF_SEC: float = 1.0
    BACKOFF_MULTIPLIER: int = 2
    ATTEMPT_TIMEOUT_SEC: float = 10.0


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"
