from typing import Any, Dict, List, Optional

import logging
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from timerapi.core.exceptions import NotFoundError, ServiceException, ValidationError
from timerapi.repositories.timer_repository import TimerRepository
from timerapi.schemas.common import ErrorCode
from timerapi.schemas.timer import (
    AnalyticsSummary,
    PublicTimerResponse,
    TimerAnalytics,
    TimerAnalyticsRow,
    TimerCreate,
    TimerKind,
    TimerSchema,
    TimerStatus,
    TimerUpdate,
)
from timerapi.services import timer_matcher
from timerapi.services.timer_status import remaining_seconds, status_for_window
from timerapi.utils.timezone_utils import SystemClock

logger = logging.getLogger(__name__)

# TimerCreate 검증에 다시 태울 레코드 필드
_EDITABLE_FIELDS = (
    "name",
    "kind",
    "start_date",
    "end_date",
    "duration_seconds",
    "target_type",
    "target_ids",
    "priority",
    "status",
    "customization",
)


class TimerService:
    """타이머 관리 및 스토어프론트 노출 타이머 선택 비즈니스 로직"""

    def __init__(self, db: Session, clock: Optional[Any] = None):
        self.db = db
        self.repo = TimerRepository(db)
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Merchant CRUD
    # ------------------------------------------------------------------

    def list_timers(self, shop: str) -> List[TimerSchema]:
        """상점의 전체 타이머 (최근 생성 순)"""
        return self.repo.find_all_by_shop(shop)

    def get_timer(self, shop: str, timer_id: int) -> TimerSchema:
        """
        상점 범위 안에서 타이머 조회

        Raises:
            NotFoundError: 타이머가 없거나 다른 상점 소유인 경우
        """
        timer = self.repo.find_by_id_and_shop(timer_id, shop)
        if timer is None:
            raise NotFoundError(details={"timer_id": timer_id})
        return timer

    def create_timer(self, shop: str, payload: TimerCreate) -> TimerSchema:
        """
        타이머 생성

        저장 직전에 현재 시각 기준 유효 상태를 반영합니다.
        (draft는 그대로 유지)
        """
        fields = payload.model_dump(mode="json")
        fields["start_date"] = payload.start_date
        fields["end_date"] = payload.end_date
        fields["status"] = self._effective_status_for(payload)

        timer = self.repo.create_timer(shop, **fields)
        if timer is None:
            raise ServiceException("Failed to create timer")

        logger.info(
            f"Created timer {timer.id} ({timer.kind.value}) for {shop} with status {timer.status.value}"
        )
        return timer

    def update_timer(
        self, shop: str, timer_id: int, payload: TimerUpdate
    ) -> TimerSchema:
        """
        타이머 부분 수정

        기존 레코드에 변경분을 병합한 뒤 생성 시와 같은 규칙으로 다시 검증하고,
        현재 시각 기준 유효 상태를 반영해 저장합니다.

        Raises:
            NotFoundError: 타이머가 없는 경우
            ValidationError: 종류 변경 시도 또는 병합 결과가 유효하지 않은 경우
        """
        existing = self.get_timer(shop, timer_id)

        changes = payload.model_dump(exclude_unset=True)
        if "kind" in changes and changes["kind"] != existing.kind:
            raise ValidationError(
                message="Timer kind cannot be changed",
                details={"kind": existing.kind.value},
                error_code=ErrorCode.TIMER_KIND_IMMUTABLE.value,
            )

        merged = self._merge(existing, changes)
        try:
            validated = TimerCreate.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(
                message="Validation failed",
                details={
                    "errors": e.errors(
                        include_url=False, include_context=False, include_input=False
                    )
                },
            )

        fields = validated.model_dump(mode="json")
        fields["start_date"] = validated.start_date
        fields["end_date"] = validated.end_date
        fields["status"] = self._effective_status_for(validated)

        timer = self.repo.update_for_shop(timer_id, shop, **fields)
        if timer is None:
            raise NotFoundError(details={"timer_id": timer_id})

        if timer.status != existing.status:
            logger.info(
                f"Timer {timer.id} status {existing.status.value} -> {timer.status.value} on update"
            )
        return timer

    def delete_timer(self, shop: str, timer_id: int) -> None:
        if not self.repo.delete_for_shop(timer_id, shop):
            raise NotFoundError(details={"timer_id": timer_id})
        logger.info(f"Deleted timer {timer_id} for {shop}")

    def _merge(self, existing: TimerSchema, changes: Dict[str, Any]) -> Dict[str, Any]:
        merged = {field: getattr(existing, field) for field in _EDITABLE_FIELDS}

        customization_changes = changes.pop("customization", None)
        if customization_changes:
            customization = dict(existing.customization)
            customization.update(
                {k: v for k, v in customization_changes.items() if v is not None}
            )
            merged["customization"] = customization

        # 대상이 'all'로 바뀌면 target_ids는 검증 단계에서 비워짐
        merged.update(changes)
        return merged

    def _effective_status_for(self, payload: TimerCreate) -> TimerStatus:
        """저장될 타이머의 유효 상태 계산 (레코드 저장 전 단계)"""
        if payload.status == TimerStatus.DRAFT or payload.kind == TimerKind.EVERGREEN:
            return payload.status
        return status_for_window(payload.start_date, payload.end_date, self.clock.now())

    # ------------------------------------------------------------------
    # Storefront matching
    # ------------------------------------------------------------------

    def find_matching_timer(
        self,
        shop: str,
        product_id: Optional[str] = None,
        collection_id: Optional[str] = None,
    ) -> Optional[TimerSchema]:
        """
        상품/컬렉션 컨텍스트에 노출할 타이머를 선택합니다.

        Returns:
            Optional[TimerSchema]: 선택된 타이머, 해당 없음이면 None
        """
        candidates = self.repo.find_by_shop_and_statuses(
            shop, list(timer_matcher.CANDIDATE_STATUSES)
        )
        return timer_matcher.find_matching_timer(
            shop, product_id, collection_id, candidates, self.clock.now()
        )

    def get_public_timer(
        self,
        shop: str,
        product_id: Optional[str] = None,
        collection_id: Optional[str] = None,
    ) -> Optional[PublicTimerResponse]:
        """스토어프론트 응답 형식으로 선택된 타이머를 반환합니다."""
        timer = self.find_matching_timer(shop, product_id, collection_id)
        if timer is None:
            return None
        return self.to_public(timer)

    def to_public(self, timer: TimerSchema) -> PublicTimerResponse:
        response = PublicTimerResponse(
            id=timer.id,
            kind=timer.kind,
            customization=timer.customization,
        )
        if timer.kind == TimerKind.FIXED:
            response.end_date = timer.end_date
            response.remaining_seconds = remaining_seconds(timer, self.clock.now())
        else:
            response.duration_seconds = timer.duration_seconds
        return response

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def get_timer_analytics(self, shop: str, timer_id: int) -> TimerAnalytics:
        timer = self.get_timer(shop, timer_id)
        return TimerAnalytics(
            impressions=timer.impressions,
            last_impression_at=timer.last_impression_at,
            created_at=timer.created_at,
            status=timer.status,
        )

    def get_analytics_summary(self, shop: str) -> AnalyticsSummary:
        """상점 전체 타이머의 노출 통계 요약"""
        timers = self.repo.find_all_by_shop(shop)
        return AnalyticsSummary(
            total_timers=len(timers),
            active_timers=sum(1 for t in timers if t.status == TimerStatus.ACTIVE),
            total_impressions=sum(t.impressions or 0 for t in timers),
            timers=[
                TimerAnalyticsRow(
                    id=t.id,
                    name=t.name,
                    impressions=t.impressions or 0,
                    status=t.status,
                    last_impression_at=t.last_impression_at,
                )
                for t in timers
            ],
        )
