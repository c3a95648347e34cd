"""
core/utils/timezone.py 테스트
"""

from datetime import datetime, timedelta, timezone

from core.utils.timezone import ensure_utc, now_utc


class TestNowUtc:
    def test_is_aware_utc(self) -> None:
        """UTC aware"""
        assert now_utc().tzinfo == timezone.utc


class TestEnsureUtc:
    """ensure_utc 테스트"""

    def test_naive_treated_as_utc(self) -> None:
        naive = datetime(2024, 1, 1, 12, 0)

        result = ensure_utc(naive)

        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_converts_other_timezone(self) -> None:
        """KST → UTC 변환"""
        kst = datetime(2024, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=9)))

        result = ensure_utc(kst)

        assert result == datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc
