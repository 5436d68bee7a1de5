from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from timerapi.containers import Container
from timerapi.schemas.health import HealthCheckResponse
from timerapi.services.impression_service import ImpressionRecorder
from timerapi.services.timer_scheduler import TimerScheduler

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
@inject
def health_check(
    scheduler: TimerScheduler = Depends(Provide[Container.services.timer_scheduler]),
    recorder: ImpressionRecorder = Depends(
        Provide[Container.services.impression_recorder]
    ),
) -> HealthCheckResponse:
    """Health check endpoint with scheduler status and impression counters."""

    return HealthCheckResponse(
        scheduler=scheduler.status(),
        impressions=recorder.stats(),
    )
