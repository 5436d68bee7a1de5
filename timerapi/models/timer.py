import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from timerapi.models.base import BaseModel


class TimerKindEnum(enum.Enum):
    FIXED = "fixed"  # 모든 방문자에게 동일한 시작/종료 시각
    EVERGREEN = "evergreen"  # 방문자별 최초 노출 시점부터 duration 카운트다운


class TargetTypeEnum(enum.Enum):
    ALL = "all"
    PRODUCTS = "products"
    COLLECTIONS = "collections"


class TimerStatusEnum(enum.Enum):
    DRAFT = "draft"  # 수동 보류 상태, 자동 전환 대상 아님
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Timer(BaseModel):
    __tablename__ = "timers"
    __table_args__ = (
        Index("idx_timers_shop_status", "shop", "status"),
        Index("idx_timers_kind_status", "kind", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shop: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    kind: Mapped[TimerKindEnum] = mapped_column(
        Enum(TimerKindEnum, values_callable=_enum_values, name="timer_kind"),
        nullable=False,
    )

    # Fixed timer fields
    start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Evergreen timer fields
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Targeting
    target_type: Mapped[TargetTypeEnum] = mapped_column(
        Enum(TargetTypeEnum, values_callable=_enum_values, name="timer_target_type"),
        nullable=False,
        default=TargetTypeEnum.ALL,
    )
    target_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Higher number = higher priority, only compared within the same specificity
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[TimerStatusEnum] = mapped_column(
        Enum(TimerStatusEnum, values_callable=_enum_values, name="timer_status"),
        nullable=False,
        default=TimerStatusEnum.DRAFT,
        index=True,
    )

    # Display configuration, stored as-is
    customization: Mapped[Dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    # Analytics
    impressions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_impression_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self):
        return (
            f"<Timer(id={self.id}, shop={self.shop}, kind={self.kind.value}, "
            f"status={self.status.value})>"
        )
