from datetime import timedelta
from unittest.mock import Mock

from timerapi.repositories.timer_repository import TimerRepository
from timerapi.schemas.timer import TimerKind
from timerapi.services.impression_service import ImpressionRecorder

from tests.conftest import NOW, SHOP, FixedClock


class TestImpressionRecorder:
    """노출 수 기록 테스트"""

    def test_record_increments_counter(self, session_factory):
        # Arrange
        session = session_factory()
        timer = TimerRepository(session).create_timer(
            SHOP, name="Offer", kind=TimerKind.EVERGREEN, duration_seconds=600
        )
        session.close()
        recorder = ImpressionRecorder(session_factory, clock=FixedClock())

        # Act
        first = recorder.record(timer.id)
        second = recorder.record(timer.id)

        # Assert
        stored = TimerRepository(session_factory()).find_by_id_and_shop(timer.id, SHOP)
        assert first is True and second is True
        assert stored.impressions == 2
        assert stored.last_impression_at == NOW
        assert recorder.recorded == 2
        assert recorder.stats().recorded == 2
        assert recorder.failed == 0

    def test_missing_timer_is_not_an_error(self, session_factory):
        # Arrange
        recorder = ImpressionRecorder(session_factory, clock=FixedClock())

        # Act
        result = recorder.record(999)

        # Assert
        assert result is False
        assert recorder.failed == 0

    def test_failure_is_logged_not_raised(self):
        # Arrange
        session_factory = Mock(side_effect=RuntimeError("pool exhausted"))
        recorder = ImpressionRecorder(
            session_factory, clock=FixedClock(NOW + timedelta(minutes=1))
        )

        # Act
        result = recorder.record(1)

        # Assert
        assert result is False
        assert recorder.failed == 1
        assert recorder.stats().failed == 1
        assert recorder.recorded == 0
