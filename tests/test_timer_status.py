from datetime import datetime, timedelta, timezone

import pytest

from timerapi.schemas.timer import TimerKind, TimerStatus
from timerapi.services.timer_status import (
    compute_effective_status,
    is_active,
    remaining_seconds,
    status_for_window,
)

START = datetime(2024, 6, 15, 0, 0, 0, tzinfo=timezone.utc)
END = datetime(2024, 6, 16, 0, 0, 0, tzinfo=timezone.utc)


class TestComputeEffectiveStatus:
    """유효 상태 계산 테스트"""

    @pytest.mark.parametrize(
        "now, expected",
        [
            (START - timedelta(seconds=1), TimerStatus.SCHEDULED),
            (START, TimerStatus.ACTIVE),
            (START + timedelta(hours=12), TimerStatus.ACTIVE),
            (END, TimerStatus.ACTIVE),
            (END + timedelta(seconds=1), TimerStatus.EXPIRED),
        ],
    )
    def test_fixed_timer_follows_window_inclusive(self, make_timer, now, expected):
        """fixed 타이머 상태는 기간으로 결정되며 경계는 active에 포함"""
        # Arrange
        timer = make_timer(status=TimerStatus.SCHEDULED, start_date=START, end_date=END)

        # Act
        result = compute_effective_status(timer, now)

        # Assert
        assert result == expected

    @pytest.mark.parametrize(
        "now", [START - timedelta(days=1), START, END + timedelta(days=1)]
    )
    def test_draft_is_never_changed(self, make_timer, now):
        # Arrange
        timer = make_timer(status=TimerStatus.DRAFT, start_date=START, end_date=END)

        # Act & Assert
        assert compute_effective_status(timer, now) == TimerStatus.DRAFT

    def test_stored_expired_is_recomputed_from_window(self, make_timer):
        """기간이 연장된 expired 타이머는 다시 active로 계산"""
        # Arrange
        timer = make_timer(status=TimerStatus.EXPIRED, start_date=START, end_date=END)

        # Act
        result = compute_effective_status(timer, START + timedelta(hours=1))

        # Assert
        assert result == TimerStatus.ACTIVE

    @pytest.mark.parametrize(
        "stored", [TimerStatus.SCHEDULED, TimerStatus.ACTIVE, TimerStatus.EXPIRED]
    )
    def test_evergreen_keeps_stored_status(self, make_timer, stored):
        # Arrange
        timer = make_timer(kind=TimerKind.EVERGREEN, status=stored)

        # Act & Assert
        assert compute_effective_status(timer, END + timedelta(days=365)) == stored

    def test_naive_now_is_treated_as_utc(self, make_timer):
        # Arrange
        timer = make_timer(status=TimerStatus.SCHEDULED, start_date=START, end_date=END)

        # Act
        result = compute_effective_status(timer, datetime(2024, 6, 15, 6, 0, 0))

        # Assert
        assert result == TimerStatus.ACTIVE

    def test_status_for_window_matches_compute(self):
        assert status_for_window(START, END, START - timedelta(minutes=1)) == TimerStatus.SCHEDULED
        assert status_for_window(START, END, END) == TimerStatus.ACTIVE
        assert status_for_window(START, END, END + timedelta(minutes=1)) == TimerStatus.EXPIRED


class TestIsActive:
    """노출 가능 여부 판단 테스트"""

    def test_fixed_ignores_stale_stored_status(self, make_timer):
        """저장 상태가 scheduled여도 기간 안이면 노출"""
        # Arrange
        timer = make_timer(status=TimerStatus.SCHEDULED, start_date=START, end_date=END)

        # Act & Assert
        assert is_active(timer, START + timedelta(hours=1)) is True

    def test_fixed_stored_active_but_past_end(self, make_timer):
        # Arrange
        timer = make_timer(status=TimerStatus.ACTIVE, start_date=START, end_date=END)

        # Act & Assert
        assert is_active(timer, END + timedelta(seconds=1)) is False

    def test_draft_never_active(self, make_timer):
        # Arrange
        timer = make_timer(status=TimerStatus.DRAFT, start_date=START, end_date=END)

        # Act & Assert
        assert is_active(timer, START + timedelta(hours=1)) is False

    def test_evergreen_trusts_stored_status(self, make_timer):
        # Arrange
        active = make_timer(kind=TimerKind.EVERGREEN, status=TimerStatus.ACTIVE)
        scheduled = make_timer(kind=TimerKind.EVERGREEN, status=TimerStatus.SCHEDULED)

        # Act & Assert
        assert is_active(active, START) is True
        assert is_active(scheduled, START) is False


class TestRemainingSeconds:
    def test_active_fixed_timer(self, make_timer):
        # Arrange
        timer = make_timer(start_date=START, end_date=END)

        # Act
        result = remaining_seconds(timer, END - timedelta(seconds=90.5))

        # Assert
        assert result == 90

    def test_inactive_or_evergreen_returns_none(self, make_timer):
        # Arrange
        expired = make_timer(start_date=START, end_date=END)
        evergreen = make_timer(kind=TimerKind.EVERGREEN)

        # Act & Assert
        assert remaining_seconds(expired, END + timedelta(seconds=1)) is None
        assert remaining_seconds(evergreen, START) is None
