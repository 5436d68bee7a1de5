"""
타이머 상태 점검 스케줄러

애플리케이션 lifespan 동안 일정 간격으로 상태 점검 스윕을 실행합니다.

- start(): 시작 직후 1회 + 주기 실행 (실행 중인 이벤트 루프 필요)
- stop(): 이후 예약만 취소, 이미 워커 스레드에서 진행 중인 스윕은 끝까지 실행
- run_once(): 동기 1회 실행, 이전 스윕이 진행 중이면 건너뜀 (None 반환)

스윕은 DB I/O를 수행하므로 run_in_executor로 실행하여 요청 처리 루프를 막지 않습니다.
"""

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Optional

from timerapi.database.session import SessionFactory, session_scope
from timerapi.schemas.scheduler import SchedulerStatus, SweepResult
from timerapi.services.reconciliation_service import ReconciliationService
from timerapi.utils.timezone_utils import SystemClock

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MINUTES = 5


class TimerScheduler:
    """fixed 타이머 상태 점검 주기 실행기"""

    def __init__(
        self,
        session_factory: SessionFactory,
        interval_minutes: float = DEFAULT_INTERVAL_MINUTES,
        clock: Optional[Any] = None,
    ):
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")

        self.session_factory = session_factory
        self.interval_minutes = interval_minutes
        self.clock = clock or SystemClock()

        self._task: Optional[asyncio.Task] = None
        self._sweep_lock = threading.Lock()
        self._last_run_at: Optional[datetime] = None
        self._next_run_at: Optional[datetime] = None
        self._last_result: Optional[SweepResult] = None

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, run_immediately: bool = True) -> bool:
        """
        주기 실행을 시작합니다.

        Returns:
            bool: 새로 시작했으면 True, 이미 실행 중이면 False
        """
        if self.is_running:
            logger.warning("[Scheduler] Already running")
            return False

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run_loop(run_immediately))
        logger.info(
            f"[Scheduler] Timer status scheduler started (every {self.interval_minutes} minute(s))"
        )
        return True

    def stop(self) -> None:
        """이후 예약된 스윕을 취소합니다."""
        if self._task is None:
            return

        self._task.cancel()
        self._task = None
        self._next_run_at = None
        logger.info("[Scheduler] Timer status scheduler stopped")

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            is_running=self.is_running,
            interval_minutes=self.interval_minutes,
            sweep_in_progress=self._sweep_lock.locked(),
            last_run_at=self._last_run_at,
            next_run_at=self._next_run_at if self.is_running else None,
            last_result=self._last_result,
        )

    def run_once(self) -> Optional[SweepResult]:
        """
        스윕을 1회 실행합니다.

        Returns:
            Optional[SweepResult]: 실행 결과, 다른 스윕이 진행 중이면 None
        """
        if not self._sweep_lock.acquire(blocking=False):
            logger.warning("[Scheduler] Previous sweep still in progress, skipping")
            return None

        try:
            started_at = self.clock.now()
            try:
                with session_scope(self.session_factory) as db:
                    result = ReconciliationService(db, clock=self.clock).run_sweep(
                        started_at
                    )
            except Exception as e:
                # 세션 생성/정리 단계 실패도 다음 주기에 재시도
                logger.error(f"[Scheduler] Sweep failed: {e}")
                result = SweepResult(started_at=started_at, load_failed=True, error=str(e))

            self._last_run_at = started_at
            self._last_result = result
            return result
        finally:
            self._sweep_lock.release()

    def _dispatch(self) -> asyncio.Future:
        """워커 스레드에서 스윕을 실행하고 완료를 기다리지 않습니다."""
        future = asyncio.get_running_loop().run_in_executor(None, self.run_once)
        future.add_done_callback(_log_worker_failure)
        return future

    async def _run_loop(self, run_immediately: bool) -> None:
        if run_immediately:
            logger.info("[Scheduler] Running initial timer status check")
            self._dispatch()

        while True:
            self._next_run_at = self.clock.now() + timedelta(
                seconds=self.interval_seconds
            )
            await asyncio.sleep(self.interval_seconds)
            # 이전 스윕이 끝나지 않았으면 run_once가 이번 주기를 건너뜀
            self._dispatch()


def _log_worker_failure(future: asyncio.Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"[Scheduler] Sweep worker crashed: {error}")
