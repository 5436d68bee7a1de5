from typing import Any

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from timerapi.containers import Container
from timerapi.core.shop_auth import get_current_shop
from timerapi.schemas.common import BaseResponse
from timerapi.services.timer_service import TimerService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/timer/{timer_id}", response_model=BaseResponse)
@inject
def get_timer_analytics(
    timer_id: int,
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    """단일 타이머의 노출 수와 상태"""
    analytics = service.get_timer_analytics(shop, timer_id)
    return BaseResponse(
        success=True, data={"analytics": analytics.model_dump(mode="json")}
    )


@router.get("/summary", response_model=BaseResponse)
@inject
def get_analytics_summary(
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    """
    상점 전체 타이머 노출 요약

    Returns:
        BaseResponse: 전체/활성 타이머 수, 총 노출 수, 타이머별 행 (최근 생성 순)
    """
    summary = service.get_analytics_summary(shop)
    return BaseResponse(success=True, data={"summary": summary.model_dump(mode="json")})
