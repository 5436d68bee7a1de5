"""
타임존 유틸리티

타이머의 시작/종료 시각은 모두 UTC 기준으로 비교합니다.
SQLite처럼 타임존 정보를 보존하지 않는 저장소에서 읽은 naive datetime은 UTC로 간주합니다.
"""

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def get_utc_now() -> datetime:
    """현재 UTC 시간을 반환합니다."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """datetime을 UTC aware 값으로 정규화합니다."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        # naive datetime은 UTC로 가정
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


class SystemClock:
    """현재 시각 공급자. 테스트에서는 now()를 가진 임의 객체로 대체합니다."""

    def now(self) -> datetime:
        return get_utc_now()
