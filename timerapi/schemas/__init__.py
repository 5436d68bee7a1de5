from .common import BaseResponse, Error, ErrorCode
from .timer import (
    TimerCreate,
    TimerUpdate,
    TimerSchema,
    TimerStatus,
    TimerKind,
    TargetType,
    PublicTimerResponse,
)
from .scheduler import SweepResult, SchedulerStatus
