"""
타이머 상태 계산

저장된 status와 무관하게, 타이머 종류와 기간, 현재 시각만으로
'지금 이 순간 타이머가 가져야 할 상태'를 계산하는 순수 함수 모음입니다.
계산 결과의 저장은 호출자(스케줄러 스윕, 타이머 저장 경로)의 책임입니다.

Fixed 타이머 상태 전이 (draft가 아닐 때):

    now < start_date              -> scheduled
    start_date <= now <= end_date -> active   (경계 포함)
    now > end_date                -> expired

draft는 수동 보류 상태로 어떤 자동 전환도 적용되지 않습니다.
Evergreen 타이머는 방문자별로 카운트다운하므로 서버 측 시간 기반 전환이 없습니다.
"""

import math
from datetime import datetime
from typing import Optional

from timerapi.schemas.timer import TimerKind, TimerSchema, TimerStatus
from timerapi.utils.timezone_utils import ensure_utc


def status_for_window(
    start_date: datetime, end_date: datetime, now: datetime
) -> TimerStatus:
    """기간과 현재 시각으로 fixed 타이머의 시간 기반 상태를 계산합니다."""
    now = ensure_utc(now)
    if now < ensure_utc(start_date):
        return TimerStatus.SCHEDULED
    if now > ensure_utc(end_date):
        return TimerStatus.EXPIRED
    return TimerStatus.ACTIVE


def compute_effective_status(timer: TimerSchema, now: datetime) -> TimerStatus:
    """
    현재 시각 기준 타이머의 유효 상태를 계산합니다.

    Args:
        timer: 타이머 레코드
        now: 기준 시각

    Returns:
        TimerStatus: draft는 그대로, evergreen은 저장된 상태 그대로,
        fixed는 기간으로부터 계산한 상태
    """
    if timer.status == TimerStatus.DRAFT:
        return TimerStatus.DRAFT

    if timer.kind == TimerKind.EVERGREEN:
        return TimerStatus(timer.status)

    return status_for_window(timer.start_date, timer.end_date, now)


def is_active(timer: TimerSchema, now: datetime) -> bool:
    """
    타이머를 지금 노출해도 되는지 판단합니다.

    fixed 타이머는 저장된 status가 오래되었을 수 있으므로 신뢰하지 않고
    항상 기간으로부터 다시 계산합니다.
    """
    if timer.status == TimerStatus.DRAFT:
        return False

    if timer.kind == TimerKind.EVERGREEN:
        return timer.status == TimerStatus.ACTIVE

    return compute_effective_status(timer, now) == TimerStatus.ACTIVE


def remaining_seconds(timer: TimerSchema, now: datetime) -> Optional[int]:
    """활성 fixed 타이머의 남은 시간(초). 그 외에는 None."""
    if timer.kind != TimerKind.FIXED or not is_active(timer, now):
        return None
    delta = ensure_utc(timer.end_date) - ensure_utc(now)
    return max(0, math.floor(delta.total_seconds()))
