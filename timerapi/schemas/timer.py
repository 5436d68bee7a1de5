import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from timerapi.utils.timezone_utils import ensure_utc

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"
MIN_DURATION_SECONDS = 60
MAX_DURATION_SECONDS = 86400  # 24 hours

_HTML_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_html(value: Any) -> Any:
    """문자열에서 HTML 태그를 제거하고 앞뒤 공백을 정리합니다."""
    if isinstance(value, str):
        return _HTML_TAG_PATTERN.sub("", value).strip()
    return value


class TimerKind(str, Enum):
    FIXED = "fixed"
    EVERGREEN = "evergreen"


class TargetType(str, Enum):
    ALL = "all"
    PRODUCTS = "products"
    COLLECTIONS = "collections"


class TimerStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"


class TimerPosition(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    CUSTOM = "custom"


class TimerSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class UrgencyNotification(str, Enum):
    COLOR_PULSE = "color-pulse"
    TEXT_BLINK = "text-blink"
    NONE = "none"


class TimerCustomization(BaseModel):
    """스토어프론트 위젯 표시 설정 (코어 로직은 해석하지 않음)"""

    background_color: str = Field(default="#ff0000", pattern=HEX_COLOR_PATTERN)
    text_color: str = Field(default="#ffffff", pattern=HEX_COLOR_PATTERN)
    position: TimerPosition = Field(default=TimerPosition.TOP)
    timer_size: TimerSize = Field(default=TimerSize.MEDIUM)
    title: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=500)
    show_description: bool = Field(default=False)
    message: str = Field(default="Hurry! Sale ends in", max_length=200)
    show_urgency: bool = Field(default=True)
    urgency_threshold: int = Field(
        default=3600, ge=0, description="긴급 표시를 시작할 남은 시간(초)"
    )
    urgency_notification: UrgencyNotification = Field(
        default=UrgencyNotification.COLOR_PULSE
    )

    @field_validator("title", "description", "message", mode="before")
    @classmethod
    def _sanitize_text(cls, value: Any) -> Any:
        return strip_html(value)


class TimerCustomizationUpdate(BaseModel):
    """부분 수정용 표시 설정 - 전달된 필드만 기존 값에 병합"""

    background_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    text_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    position: Optional[TimerPosition] = None
    timer_size: Optional[TimerSize] = None
    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    show_description: Optional[bool] = None
    message: Optional[str] = Field(default=None, max_length=200)
    show_urgency: Optional[bool] = None
    urgency_threshold: Optional[int] = Field(default=None, ge=0)
    urgency_notification: Optional[UrgencyNotification] = None

    @field_validator("title", "description", "message", mode="before")
    @classmethod
    def _sanitize_text(cls, value: Any) -> Any:
        return strip_html(value)


class TimerCreate(BaseModel):
    """타이머 생성 요청 스키마"""

    name: str = Field(..., min_length=1, max_length=100, description="타이머 이름")
    kind: TimerKind = Field(..., description="fixed | evergreen")
    start_date: Optional[datetime] = Field(None, description="시작 시각 (fixed 전용)")
    end_date: Optional[datetime] = Field(None, description="종료 시각 (fixed 전용)")
    duration_seconds: Optional[int] = Field(
        None,
        ge=MIN_DURATION_SECONDS,
        le=MAX_DURATION_SECONDS,
        description="방문자별 카운트다운 길이 (evergreen 전용)",
    )
    target_type: TargetType = Field(default=TargetType.ALL)
    target_ids: List[str] = Field(default_factory=list)
    priority: int = Field(default=0, ge=0, le=100)
    status: TimerStatus = Field(default=TimerStatus.DRAFT)
    customization: TimerCustomization = Field(default_factory=TimerCustomization)

    @field_validator("name", mode="before")
    @classmethod
    def _sanitize_name(cls, value: Any) -> Any:
        return strip_html(value)

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_kind_and_targeting(self) -> "TimerCreate":
        if self.kind == TimerKind.FIXED:
            if self.start_date is None:
                raise ValueError("Start date is required for fixed timers")
            if self.end_date is None:
                raise ValueError("End date is required for fixed timers")
            if self.end_date <= self.start_date:
                raise ValueError("End date must be after start date")
            if self.duration_seconds is not None:
                raise ValueError("Duration is not allowed for fixed timers")
        else:
            if self.duration_seconds is None:
                raise ValueError("Duration is required for evergreen timers")
            if self.start_date is not None or self.end_date is not None:
                raise ValueError("Start/end dates are not allowed for evergreen timers")

        if self.target_type == TargetType.ALL:
            self.target_ids = []
        elif not self.target_ids:
            raise ValueError('Target IDs are required when target type is not "all"')
        return self


class TimerUpdate(BaseModel):
    """타이머 부분 수정 요청 스키마

    교차 필드 검증(기간, 대상 등)은 기존 레코드와 병합한 뒤 서비스에서 수행합니다.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    kind: Optional[TimerKind] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration_seconds: Optional[int] = Field(
        None, ge=MIN_DURATION_SECONDS, le=MAX_DURATION_SECONDS
    )
    target_type: Optional[TargetType] = None
    target_ids: Optional[List[str]] = None
    priority: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[TimerStatus] = None
    customization: Optional[TimerCustomizationUpdate] = None

    @field_validator("name", mode="before")
    @classmethod
    def _sanitize_name(cls, value: Any) -> Any:
        return strip_html(value)

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _require_any_field(self) -> "TimerUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class TimerSchema(BaseModel):
    """타이머 레코드 스키마 (리포지토리 반환값)"""

    id: int = Field(..., description="타이머 ID")
    shop: str = Field(..., description="상점 도메인")
    name: str = Field(..., description="타이머 이름")
    kind: TimerKind
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    target_type: TargetType = TargetType.ALL
    target_ids: List[str] = Field(default_factory=list)
    priority: int = 0
    status: TimerStatus = TimerStatus.DRAFT
    customization: Dict[str, Any] = Field(default_factory=dict)
    impressions: int = 0
    last_impression_at: Optional[datetime] = None
    created_at: datetime = Field(..., description="생성 시간")
    updated_at: Optional[datetime] = Field(None, description="수정 시간")

    @field_validator("start_date", "end_date", "last_impression_at", "created_at", "updated_at")
    @classmethod
    def _normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    class Config:
        from_attributes = True


class PublicTimerResponse(BaseModel):
    """스토어프론트 위젯에 노출되는 타이머 정보"""

    id: int
    kind: TimerKind
    customization: Dict[str, Any] = Field(default_factory=dict)
    end_date: Optional[datetime] = Field(None, description="종료 시각 (fixed)")
    remaining_seconds: Optional[int] = Field(None, description="남은 시간(초) (fixed)")
    duration_seconds: Optional[int] = Field(
        None, description="카운트다운 길이(초) (evergreen)"
    )


class TimerAnalytics(BaseModel):
    """단일 타이머 노출 통계"""

    impressions: int = 0
    last_impression_at: Optional[datetime] = None
    created_at: datetime
    status: TimerStatus


class TimerAnalyticsRow(BaseModel):
    id: int
    name: str
    impressions: int = 0
    status: TimerStatus
    last_impression_at: Optional[datetime] = None


class AnalyticsSummary(BaseModel):
    """상점 전체 타이머 노출 통계"""

    total_timers: int = 0
    active_timers: int = 0
    total_impressions: int = 0
    timers: List[TimerAnalyticsRow] = Field(default_factory=list)
