from typing import Any

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from timerapi.containers import Container
from timerapi.core.shop_auth import get_current_shop
from timerapi.schemas.common import BaseResponse
from timerapi.schemas.timer import TimerCreate, TimerUpdate
from timerapi.services.timer_service import TimerService

router = APIRouter(prefix="/timers", tags=["timers"])


@router.get("/", response_model=BaseResponse)
@inject
def list_timers(
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    """
    상점의 타이머 목록을 최근 생성 순으로 조회합니다.

    Args:
        shop (str): 요청 상점 도메인
        service (TimerService): 타이머 서비스

    Returns:
        BaseResponse: 타이머 목록과 개수
    """
    timers = service.list_timers(shop)
    return BaseResponse(
        success=True,
        data={"timers": [t.model_dump(mode="json") for t in timers]},
        meta={"count": len(timers)},
    )


@router.get("/{timer_id}", response_model=BaseResponse)
@inject
def get_timer(
    timer_id: int,
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    """단일 타이머 조회 (다른 상점 소유면 404)"""
    timer = service.get_timer(shop, timer_id)
    return BaseResponse(success=True, data={"timer": timer.model_dump(mode="json")})


@router.post("/", response_model=BaseResponse, status_code=status.HTTP_201_CREATED)
@inject
def create_timer(
    payload: TimerCreate,
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    """
    타이머를 생성합니다.

    fixed 타이머는 요청한 status 대신 현재 시각 기준 유효 상태로 저장됩니다.
    (draft 요청은 그대로 draft)
    """
    timer = service.create_timer(shop, payload)
    return BaseResponse(success=True, data={"timer": timer.model_dump(mode="json")})


@router.put("/{timer_id}", response_model=BaseResponse)
@inject
def update_timer(
    timer_id: int,
    payload: TimerUpdate,
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    """타이머 부분 수정. 종류(kind)는 변경할 수 없습니다."""
    timer = service.update_timer(shop, timer_id, payload)
    return BaseResponse(success=True, data={"timer": timer.model_dump(mode="json")})


@router.delete("/{timer_id}", response_model=BaseResponse)
@inject
def delete_timer(
    timer_id: int,
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
) -> Any:
    service.delete_timer(shop, timer_id)
    return BaseResponse(success=True, data={"deleted_id": timer_id})
