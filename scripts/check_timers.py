"""상태 점검 스윕을 1회 실행하고 결과를 출력"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timerapi.database.connection import SessionLocal
from timerapi.logging_config import setup_logging
from timerapi.services.timer_scheduler import TimerScheduler


def check_timers() -> int:
    setup_logging("INFO")
    result = TimerScheduler(session_factory=SessionLocal).run_once()
    if result is None:
        print("Another sweep is already running")
        return 1

    print(
        f"checked={result.checked} updated={result.updated} skipped={result.skipped} "
        f"errors={result.errors} duration={result.duration_ms:.1f}ms"
    )
    for transition in result.transitions:
        print(
            f"  timer {transition.timer_id}: "
            f"{transition.from_status.value} -> {transition.to_status.value}"
        )
    if result.load_failed:
        print(f"Failed to load timers: {result.error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(check_timers())
