"""
타이머 상태 정합성 점검 (스윕)

시간은 요청과 무관하게 흐르므로, 저장된 fixed 타이머 status를
주기적으로 현재 시각 기준 유효 상태와 일치시킵니다.

- 대상: kind == fixed 이고 status != draft 인 모든 타이머
- 변경된 타이머만 레코드 단위로 저장 (불필요한 쓰기 없음)
- 저장은 조회 당시 상태일 때만 적용되어, 점검 도중 draft로 바뀐 타이머는 건너뜀
- 개별 타이머 저장 실패는 격리되어 집계되며 나머지 처리는 계속됨
- 스윕 자체는 예외를 던지지 않음 (목록 조회 실패 시 load_failed로 보고)
"""

import logging
import time
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from timerapi.repositories.timer_repository import TimerRepository
from timerapi.schemas.scheduler import StatusTransition, SweepResult
from timerapi.services.timer_status import compute_effective_status
from timerapi.utils.timezone_utils import SystemClock, ensure_utc

logger = logging.getLogger(__name__)


class ReconciliationService:
    """fixed 타이머 상태 점검 서비스"""

    def __init__(self, db: Session, clock: Optional[Any] = None):
        self.db = db
        self.repo = TimerRepository(db)
        self.clock = clock or SystemClock()

    def run_sweep(self, now: Optional[datetime] = None) -> SweepResult:
        """
        fixed 타이머 상태를 1회 점검하고 변경분을 저장합니다.

        Args:
            now: 기준 시각 (None이면 clock.now())

        Returns:
            SweepResult: 점검/변경/오류 건수와 상태 전이 목록
        """
        now = ensure_utc(now) if now is not None else self.clock.now()
        started = time.perf_counter()
        result = SweepResult(started_at=now)
        logger.info(f"[Sweep] Checking timers at {now.isoformat()}")

        try:
            timers = self.repo.find_all_fixed_non_draft()
        except Exception as e:
            result.load_failed = True
            result.error = str(e)
            result.duration_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[Sweep] Failed to load timers, will retry next cycle: {e}")
            return result

        result.checked = len(timers)
        logger.info(f"[Sweep] Found {len(timers)} timer(s) to check")

        for timer in timers:
            try:
                new_status = compute_effective_status(timer, now)
                if new_status == timer.status:
                    continue

                # 조회 이후 삭제되었거나 상태가 바뀐 타이머는 건너뜀 (draft 전환 포함)
                if not self.repo.update_status_if(timer.id, timer.status, new_status):
                    result.skipped += 1
                    logger.info(
                        f"[Sweep] Timer {timer.id} changed or disappeared since load, skipped"
                    )
                    continue

                result.updated += 1
                result.transitions.append(
                    StatusTransition(
                        timer_id=timer.id,
                        from_status=timer.status,
                        to_status=new_status,
                    )
                )
                logger.info(
                    f"[Sweep] Updated timer {timer.id} ({timer.name}) "
                    f"from {timer.status.value} to {new_status.value}"
                )
            except Exception as e:
                result.errors += 1
                logger.error(f"[Sweep] Error updating timer {timer.id}: {e}")

        result.duration_ms = (time.perf_counter() - started) * 1000

        if result.updated > 0:
            logger.info(
                f"[Sweep] Updated {result.updated} timer(s) in {result.duration_ms:.1f}ms"
            )
        elif result.errors > 0:
            logger.warning(
                f"[Sweep] No updates, but {result.errors} error(s) occurred"
            )
        else:
            logger.info(
                f"[Sweep] No timers needed updating (checked in {result.duration_ms:.1f}ms)"
            )
        if result.updated > 0 and result.errors > 0:
            logger.warning(f"[Sweep] {result.errors} timer(s) failed to update")

        return result
