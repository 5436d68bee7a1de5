from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base, declared_attr

from timerapi.utils.timezone_utils import get_utc_now

Base = declarative_base()


class TimestampMixin:
    """타임스탬프 필드를 위한 믹스인

    created_at은 타이머 선택 시 최종 tie-break 기준이므로
    DB 기본값(초 단위일 수 있음) 대신 애플리케이션 시각을 우선 사용합니다.
    """

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            default=get_utc_now,
            server_default=func.now(),
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            default=get_utc_now,
            server_default=func.now(),
            onupdate=get_utc_now,
        )


class BaseModel(Base, TimestampMixin):
    """모든 모델의 베이스 클래스"""

    __abstract__ = True

    def dict(self):
        """모델을 딕셔너리로 변환"""
        return {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }
