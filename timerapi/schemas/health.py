"""Pydantic models for health endpoints."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from timerapi.schemas.scheduler import SchedulerStatus
from timerapi.utils.timezone_utils import get_utc_now


class ImpressionStats(BaseModel):
    """Background impression recording counters since process start."""

    recorded: int = 0
    failed: int = 0


class HealthCheckResponse(BaseModel):
    """Response model for service health checks."""

    status: str = "ok"
    timestamp: datetime = Field(default_factory=get_utc_now)
    scheduler: Optional[SchedulerStatus] = None
    impressions: Optional[ImpressionStats] = None
