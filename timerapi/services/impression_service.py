import logging
import threading
from typing import Any, Optional

from timerapi.database.session import SessionFactory, session_scope
from timerapi.repositories.timer_repository import TimerRepository
from timerapi.schemas.health import ImpressionStats
from timerapi.utils.timezone_utils import SystemClock

logger = logging.getLogger(__name__)


class ImpressionRecorder:
    """
    타이머 노출 수 기록기

    공개 API 응답 이후 BackgroundTasks로 실행되며 요청과 별도의 세션을 사용합니다.
    실패는 로그와 카운터로만 남기고 호출자에게 전파하지 않습니다.
    """

    def __init__(self, session_factory: SessionFactory, clock: Optional[Any] = None):
        self.session_factory = session_factory
        self.clock = clock or SystemClock()
        self._lock = threading.Lock()
        self.recorded = 0
        self.failed = 0

    def record(self, timer_id: int) -> bool:
        """노출 1회 기록. 성공 여부를 반환합니다."""
        try:
            with session_scope(self.session_factory) as db:
                updated = TimerRepository(db).increment_impression(
                    timer_id, self.clock.now()
                )
        except Exception as e:
            with self._lock:
                self.failed += 1
            logger.error(f"Error incrementing impression for timer {timer_id}: {e}")
            return False

        if not updated:
            logger.warning(f"Impression skipped, timer {timer_id} no longer exists")
            return False

        with self._lock:
            self.recorded += 1
        return True

    def stats(self) -> ImpressionStats:
        with self._lock:
            return ImpressionStats(recorded=self.recorded, failed=self.failed)
