from typing import Any, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response

from timerapi.config import settings
from timerapi.containers import Container
from timerapi.core.exceptions import ValidationError
from timerapi.core.shop_auth import get_current_shop
from timerapi.schemas.common import BaseResponse
from timerapi.services.impression_service import ImpressionRecorder
from timerapi.services.timer_service import TimerService

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/timer", response_model=BaseResponse)
@inject
def get_public_timer(
    response: Response,
    background_tasks: BackgroundTasks,
    product_id: Optional[str] = Query(None, alias="productId"),
    collection_id: Optional[str] = Query(None, alias="collectionId"),
    shop: str = Depends(get_current_shop),
    service: TimerService = Depends(Provide[Container.services.timer_service]),
    recorder: ImpressionRecorder = Depends(
        Provide[Container.services.impression_recorder]
    ),
) -> Any:
    """
    스토어프론트 위젯용 타이머 조회

    상품/컬렉션 컨텍스트에 맞는 활성 타이머 하나를 반환합니다.
    해당하는 타이머가 없으면 timer는 null 입니다.
    노출 수 기록은 응답 후 백그라운드에서 수행됩니다.

    Args:
        product_id (Optional[str]): 상품 ID
        collection_id (Optional[str]): 컬렉션 ID
        shop (str): 요청 상점 도메인

    Returns:
        BaseResponse: {"timer": {...} | null}
    """
    if not product_id and not collection_id:
        raise ValidationError(message="Product ID or Collection ID is required")

    timer = service.get_public_timer(shop, product_id, collection_id)
    if timer is not None:
        background_tasks.add_task(recorder.record, timer.id)

    response.headers["Cache-Control"] = (
        f"public, max-age={settings.PUBLIC_CACHE_MAX_AGE}"
    )
    return BaseResponse(
        success=True,
        data={"timer": timer.model_dump(mode="json") if timer else None},
    )
