"""Pydantic models for the status reconciliation sweep and its scheduler."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from timerapi.schemas.timer import TimerStatus


class StatusTransition(BaseModel):
    timer_id: int
    from_status: TimerStatus
    to_status: TimerStatus


class SweepResult(BaseModel):
    """Outcome of one reconciliation sweep."""

    started_at: datetime
    checked: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    duration_ms: float = 0.0
    load_failed: bool = False
    error: Optional[str] = None
    transitions: List[StatusTransition] = Field(default_factory=list)


class SchedulerStatus(BaseModel):
    is_running: bool = False
    interval_minutes: float
    sweep_in_progress: bool = False
    last_run_at: Optional[datetime] = None
    next_run_at: Optional[datetime] = None
    last_result: Optional[SweepResult] = None
