"""
pytest 공통 fixture 정의
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from core.config.loader import Settings


class FakeClock:
    """수동으로 진행시키는 시계 (RateCache clock 주입용)"""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class RecordingSleep:
    """대기 시간만 기록하고 즉시 반환하는 sleep 대체"""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
fees:
  banking_fee_rate: "0.001"
  exchange_fee_rate: "0.003"

pricing:
  mode: fixed
  cache_ttl_seconds: 60
  max_attempts: 5
  initial_backoff_seconds: 0.5
  attempt_timeout_seconds: 2.0
  coingecko_base_url: https://example.test/api/v3/
  allow_stale_fallback: true
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 pricing mode의 settings.yaml 파일 생성"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text("pricing:\n  mode: invalid_mode\n", encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings():
    """Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()
