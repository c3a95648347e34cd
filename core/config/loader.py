"""
설정 로더

settings.yaml 로드 및 수수료/시세 설정 생성.
파일이 없으면 기본값 사용.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import CoinGeckoEndpoints, Defaults, Paths, RetryDefaults
from core.types import PricingMode


@dataclass(frozen=True)
class FeeSettings:
    """수수료율 설정"""

    banking_fee_rate: Decimal = Defaults.BANKING_FEE_RATE
    exchange_fee_rate: Decimal = Defaults.EXCHANGE_FEE_RATE


@dataclass(frozen=True)
class PricingSettings:
    """시세 조회 설정

    mode가 FIXED이면 고정 환율표, MARKET이면 시세 기반 교차 환율 사용
    """

    mode: PricingMode = PricingMode.MARKET
    cache_ttl_seconds: int = Defaults.CACHE_TTL_SEC
    max_attempts: int = RetryDefaults.MAX_ATTEMPTS
    initial_backoff_seconds: float = RetryDefaults.INITIAL_BACKOFF_SEC
    attempt_timeout_seconds: float = RetryDefaults.ATTEMPT_TIMEOUT_SEC
    coingecko_base_url: str = CoinGeckoEndpoints.BASE_URL
    allow_stale_fallback: bool = False

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl_seconds)


@dataclass(frozen=True)
class LedgerConfig:
    """전체 설정 (불변)"""

    fees: FeeSettings = field(default_factory=FeeSettings)
    pricing: PricingSettings = field(default_factory=PricingSettings)


class SettingsLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션 형식이 잘못되었습니다")
    return section


def _rate(section: dict[str, Any], key: str, default: Decimal) -> Decimal:
    raw = section.get(key)
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise SettingsLoadError(f"'{key}' 값이 숫자가 아닙니다: {raw!r}")
    try:
        return Decimal(str(raw))
    except InvalidOperation as e:
        raise SettingsLoadError(f"'{key}' 값이 숫자가 아닙니다: {raw!r}") from e


def _flag(section: dict[str, Any], key: str, default: bool) -> bool:
    raw = section.get(key, default)
    # "false" 같은 문자열은 bool()로 True가 되므로 YAML bool만 허용
    if not isinstance(raw, bool):
        raise SettingsLoadError(f"'{key}' 값은 true/false여야 합니다: {raw!r}")
    return raw


def _parse_fees(data: dict[str, Any]) -> FeeSettings:
    section = _section(data, "fees")
    fees = FeeSettings(
        banking_fee_rate=_rate(section, "banking_fee_rate", Defaults.BANKING_FEE_RATE),
        exchange_fee_rate=_rate(section, "exchange_fee_rate", Defaults.EXCHANGE_FEE_RATE),
    )

    for name, rate in (
        ("banking_fee_rate", fees.banking_fee_rate),
        ("exchange_fee_rate", fees.exchange_fee_rate),
    ):
        if not Decimal("0") <= rate < Decimal("1"):
            raise ValueError(f"{name}는 0 이상 1 미만이어야 합니다: {rate}")

    return fees


def _parse_pricing(data: dict[str, Any]) -> PricingSettings:
    section = _section(data, "pricing")

    mode_str = section.get("mode", PricingMode.MARKET.value)
    try:
        mode = PricingMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in PricingMode]
        raise ValueError(
            f"유효하지 않은 pricing mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    try:
        pricing = PricingSettings(
            mode=mode,
            cache_ttl_seconds=int(section.get("cache_ttl_seconds", Defaults.CACHE_TTL_SEC)),
            max_attempts=int(section.get("max_attempts", RetryDefaults.MAX_ATTEMPTS)),
            initial_backoff_seconds=float(
                section.get("initial_backoff_seconds", RetryDefaults.INITIAL_BACKOFF_SEC)
            ),
            attempt_timeout_seconds=float(
                section.get("attempt_timeout_seconds", RetryDefaults.ATTEMPT_TIMEOUT_SEC)
            ),
            coingecko_base_url=str(
                section.get("coingecko_base_url", CoinGeckoEndpoints.BASE_URL)
            ).rstrip("/"),
            allow_stale_fallback=_flag(section, "allow_stale_fallback", False),
        )
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"pricing 섹션 값 변환 실패: {e}") from e

    if pricing.cache_ttl_seconds <= 0:
        raise ValueError(f"cache_ttl_seconds는 0보다 커야 합니다: {pricing.cache_ttl_seconds}")
    if pricing.max_attempts < 1:
        raise ValueError(f"max_attempts는 1 이상이어야 합니다: {pricing.max_attempts}")
    if pricing.initial_backoff_seconds < 0:
        raise ValueError(
            f"initial_backoff_seconds는 0 이상이어야 합니다: {pricing.initial_backoff_seconds}"
        )
    if pricing.attempt_timeout_seconds <= 0:
        raise ValueError(
            f"attempt_timeout_seconds는 0보다 커야 합니다: {pricing.attempt_timeout_seconds}"
        )

    return pricing


def load_config(path: Path | None = None) -> LedgerConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerConfig 인스턴스 (파일이 없으면 기본값)

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
        ValueError: 범위를 벗어난 값 또는 유효하지 않은 mode
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return LedgerConfig()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return LedgerConfig()
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    return LedgerConfig(fees=_parse_fees(data), pricing=_parse_pricing(data))


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 한 번만 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: LedgerConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_config(settings_path)

    @property
    def config(self) -> LedgerConfig:
        assert self._config is not None
        return self._config

    @property
    def fees(self) -> FeeSettings:
        """수수료율 설정"""
        return self.config.fees

    @property
    def pricing(self) -> PricingSettings:
        """시세 조회 설정"""
        return self.config.pricing

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환"""
    return Settings(settings_path)
