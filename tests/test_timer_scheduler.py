import asyncio
from datetime import timedelta
from unittest.mock import Mock

import pytest

from timerapi.repositories.timer_repository import TimerRepository
from timerapi.schemas.timer import TargetType, TimerKind, TimerStatus
from timerapi.services.timer_scheduler import TimerScheduler

from tests.conftest import NOW, SHOP, FixedClock


def _seed_stale_timer(session_factory):
    session = session_factory()
    try:
        return TimerRepository(session).create_timer(
            SHOP,
            name="Flash Sale",
            kind=TimerKind.FIXED,
            start_date=NOW - timedelta(hours=1),
            end_date=NOW + timedelta(hours=1),
            target_type=TargetType.ALL,
            status=TimerStatus.SCHEDULED,
        )
    finally:
        session.close()


async def _wait_for_result(scheduler, attempts=200):
    for _ in range(attempts):
        if scheduler.status().last_result is not None:
            return
        await asyncio.sleep(0.01)


class TestTimerScheduler:
    """TimerScheduler 테스트"""

    def test_rejects_non_positive_interval(self, session_factory):
        with pytest.raises(ValueError):
            TimerScheduler(session_factory, interval_minutes=0)

    def test_initial_status(self, session_factory):
        # Arrange
        scheduler = TimerScheduler(session_factory, interval_minutes=5)

        # Act
        status = scheduler.status()

        # Assert
        assert status.is_running is False
        assert status.interval_minutes == 5
        assert status.sweep_in_progress is False
        assert status.last_run_at is None
        assert status.next_run_at is None

    def test_run_once_sweeps_and_records_result(self, session_factory):
        # Arrange
        timer = _seed_stale_timer(session_factory)
        scheduler = TimerScheduler(session_factory, clock=FixedClock())

        # Act
        result = scheduler.run_once()

        # Assert
        assert result.updated == 1
        assert result.transitions[0].timer_id == timer.id
        status = scheduler.status()
        assert status.last_run_at == NOW
        assert status.last_result.updated == 1
        assert status.sweep_in_progress is False

    def test_run_once_skips_while_sweep_in_progress(self, session_factory):
        # Arrange
        scheduler = TimerScheduler(session_factory, clock=FixedClock())
        scheduler._sweep_lock.acquire()

        try:
            # Act
            result = scheduler.run_once()
            in_progress = scheduler.status().sweep_in_progress
        finally:
            scheduler._sweep_lock.release()

        # Assert
        assert result is None
        assert in_progress is True

    def test_run_once_reports_session_failure(self):
        # Arrange
        session_factory = Mock(side_effect=RuntimeError("cannot connect"))
        scheduler = TimerScheduler(session_factory, clock=FixedClock())

        # Act
        result = scheduler.run_once()

        # Assert
        assert result.load_failed is True
        assert result.error == "cannot connect"

    def test_start_runs_immediately_and_stop(self, session_factory):
        # Arrange
        _seed_stale_timer(session_factory)
        scheduler = TimerScheduler(session_factory, interval_minutes=5, clock=FixedClock())

        async def scenario():
            started = scheduler.start()
            started_again = scheduler.start()
            await _wait_for_result(scheduler)
            running = scheduler.status()
            scheduler.stop()
            await asyncio.sleep(0)
            return started, started_again, running

        # Act
        started, started_again, running = asyncio.run(scenario())

        # Assert
        assert started is True
        assert started_again is False
        assert running.is_running is True
        assert running.next_run_at == NOW + timedelta(minutes=5)
        assert running.last_result.updated == 1
        stopped = scheduler.status()
        assert stopped.is_running is False
        assert stopped.next_run_at is None

    def test_recurring_sweep_without_initial_run(self, session_factory):
        # Arrange
        scheduler = TimerScheduler(session_factory, interval_minutes=0.001)

        async def scenario():
            scheduler.start(run_immediately=False)
            assert scheduler.status().last_result is None
            await _wait_for_result(scheduler)
            scheduler.stop()

        # Act
        asyncio.run(scenario())

        # Assert
        assert scheduler.status().last_result is not None
        assert scheduler.status().last_result.load_failed is False

    def test_start_requires_running_loop(self, session_factory):
        # Arrange
        scheduler = TimerScheduler(session_factory)

        # Act & Assert
        with pytest.raises(RuntimeError):
            scheduler.start()
