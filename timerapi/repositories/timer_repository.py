from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import and_, desc
from sqlalchemy.orm import Session

from timerapi.models.timer import (
    TargetTypeEnum,
    Timer,
    TimerKindEnum,
    TimerStatusEnum,
)
from timerapi.repositories.base import BaseRepository
from timerapi.schemas.timer import (
    TargetType,
    TimerKind,
    TimerSchema,
    TimerStatus,
)

# 스키마 필드 중 저장 시 모델 enum으로 변환해야 하는 항목
_ENUM_FIELDS = {
    "kind": TimerKindEnum,
    "target_type": TargetTypeEnum,
    "status": TimerStatusEnum,
}

# 상점 소유권과 식별자는 수정 대상이 아님
_IMMUTABLE_FIELDS = {"id", "shop", "created_at", "updated_at"}


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


class TimerRepository(BaseRepository[Timer, TimerSchema]):
    """타이머 데이터 접근 계층

    모든 조회/수정은 상점 단위로 범위가 제한되며 필터링은 DB 쿼리에서 수행합니다.
    """

    def __init__(self, db: Session):
        super().__init__(Timer, TimerSchema, db)

    def _to_schema(self, model_instance: Optional[Timer]) -> Optional[TimerSchema]:
        """Timer 모델을 TimerSchema로 변환"""
        if model_instance is None:
            return None

        data = {
            "id": model_instance.id,
            "shop": model_instance.shop,
            "name": model_instance.name,
            "kind": TimerKind(_enum_value(model_instance.kind)),
            "start_date": model_instance.start_date,
            "end_date": model_instance.end_date,
            "duration_seconds": model_instance.duration_seconds,
            "target_type": TargetType(_enum_value(model_instance.target_type)),
            "target_ids": list(model_instance.target_ids or []),
            "priority": model_instance.priority or 0,
            "status": TimerStatus(_enum_value(model_instance.status)),
            "customization": dict(model_instance.customization or {}),
            "impressions": model_instance.impressions or 0,
            "last_impression_at": model_instance.last_impression_at,
            "created_at": model_instance.created_at,
            "updated_at": model_instance.updated_at,
        }
        return TimerSchema(**data)

    def _to_model_values(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """스키마 값(str enum 등)을 모델 컬럼 값으로 변환"""
        values: Dict[str, Any] = {}
        for key, value in fields.items():
            if key in _ENUM_FIELDS and value is not None:
                value = _ENUM_FIELDS[key](_enum_value(value))
            values[key] = value
        return values

    def find_all_by_shop(
        self, shop: str, statuses: Optional[Sequence[TimerStatus]] = None
    ) -> List[TimerSchema]:
        """상점의 타이머 목록 (최근 생성 순)"""
        self._ensure_clean_session()
        query = self.db.query(self.model_class).filter(self.model_class.shop == shop)

        if statuses:
            query = query.filter(
                self.model_class.status.in_(
                    [TimerStatusEnum(_enum_value(s)) for s in statuses]
                )
            )

        model_instances = query.order_by(desc(self.model_class.created_at)).all()
        return self._to_schemas(model_instances)

    def find_by_shop_and_statuses(
        self, shop: str, statuses: Sequence[TimerStatus]
    ) -> List[TimerSchema]:
        """
        상점의 특정 상태 타이머 조회 (타이머 매칭 후보 로딩용)

        Args:
            shop: 상점 도메인
            statuses: 조회할 저장 상태 목록

        Returns:
            List[TimerSchema]: 조건에 맞는 타이머 목록 (입력 순서는 id 순)
        """
        if not statuses:
            return []

        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(
                and_(
                    self.model_class.shop == shop,
                    self.model_class.status.in_(
                        [TimerStatusEnum(_enum_value(s)) for s in statuses]
                    ),
                )
            )
            .order_by(self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)

    def find_by_id_and_shop(self, timer_id: int, shop: str) -> Optional[TimerSchema]:
        """상점 범위 안에서 ID로 타이머 조회"""
        self._ensure_clean_session()
        return self._to_schema(self._get_scoped_model(timer_id, shop))

    def find_all_fixed_non_draft(self) -> List[TimerSchema]:
        """상태 점검 대상 타이머 조회 - fixed 이면서 draft가 아닌 전체 타이머"""
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .populate_existing()
            .filter(
                and_(
                    self.model_class.kind == TimerKindEnum.FIXED,
                    self.model_class.status != TimerStatusEnum.DRAFT,
                )
            )
            .order_by(self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)

    def create_timer(self, shop: str, **fields: Any) -> Optional[TimerSchema]:
        """새 타이머 생성"""
        values = self._to_model_values(
            {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}
        )
        return self.create(shop=shop, **values)

    def update_for_shop(
        self, timer_id: int, shop: str, **fields: Any
    ) -> Optional[TimerSchema]:
        """
        상점 범위 안에서 타이머 수정

        Returns:
            Optional[TimerSchema]: 수정된 타이머 (없거나 다른 상점 소유면 None)
        """
        self._ensure_clean_session()
        instance = self._get_scoped_model(timer_id, shop)
        if instance is None:
            return None

        values = self._to_model_values(
            {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}
        )
        for key, value in values.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        self.db.add(instance)
        self._commit(instance)
        return self._to_schema(instance)

    def save(self, timer: TimerSchema) -> TimerSchema:
        """
        타이머 upsert (id 기준)

        기존 레코드가 있으면 변경 가능한 필드를 덮어쓰고, 없으면 새로 생성합니다.
        동일 타이머에 대한 동시 수정은 마지막 쓰기가 반영됩니다.
        """
        self._ensure_clean_session()
        values = self._to_model_values(
            timer.model_dump(exclude={"updated_at"}, mode="python")
        )

        instance = self._get_model(timer.id) if timer.id is not None else None
        if instance is None:
            instance = self.model_class(**values)
        else:
            for key, value in values.items():
                if key not in _IMMUTABLE_FIELDS:
                    setattr(instance, key, value)

        self.db.add(instance)
        self._commit(instance)
        return self._to_schema(instance)

    def update_status(
        self, timer_id: int, status: TimerStatus
    ) -> Optional[TimerSchema]:
        """타이머 상태만 변경 (레코드 단위 커밋)"""
        return self.update(timer_id, status=TimerStatusEnum(_enum_value(status)))

    def update_status_if(
        self, timer_id: int, expected: TimerStatus, status: TimerStatus
    ) -> bool:
        """
        저장 상태가 expected일 때만 status로 변경 (단일 조건부 UPDATE)

        조회 이후 다른 쓰기(예: 상점의 draft 전환)가 먼저 반영되었다면 변경하지 않습니다.

        Returns:
            bool: 변경되었는지 여부
        """
        self._ensure_clean_session()
        try:
            updated_count = (
                self.db.query(self.model_class)
                .filter(
                    and_(
                        self.model_class.id == timer_id,
                        self.model_class.status
                        == TimerStatusEnum(_enum_value(expected)),
                    )
                )
                .update(
                    {self.model_class.status: TimerStatusEnum(_enum_value(status))},
                    synchronize_session="fetch",
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return updated_count > 0

    def delete_for_shop(self, timer_id: int, shop: str) -> bool:
        """상점 범위 안에서 타이머 삭제"""
        self._ensure_clean_session()
        instance = self._get_scoped_model(timer_id, shop)
        if instance is None:
            return False

        self.db.delete(instance)
        self._commit()
        return True

    def increment_impression(self, timer_id: int, at: datetime) -> bool:
        """
        노출 수 1 증가 (DB에서 원자적으로 증가)

        Returns:
            bool: 대상 타이머가 존재해 증가했는지 여부
        """
        self._ensure_clean_session()
        try:
            updated_count = (
                self.db.query(self.model_class)
                .filter(self.model_class.id == timer_id)
                .update(
                    {
                        self.model_class.impressions: self.model_class.impressions + 1,
                        self.model_class.last_impression_at: at,
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return updated_count > 0

    def _get_scoped_model(self, timer_id: int, shop: str) -> Optional[Timer]:
        return (
            self.db.query(self.model_class)
            .filter(
                and_(
                    self.model_class.id == timer_id,
                    self.model_class.shop == shop,
                )
            )
            .first()
        )
