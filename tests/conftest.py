from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timerapi.models.base import Base
from timerapi.models.timer import Timer
from timerapi.schemas.timer import TargetType, TimerKind, TimerSchema, TimerStatus

SHOP = "test-store.myshopify.com"
OTHER_SHOP = "other-store.myshopify.com"

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """테스트용 고정 시계"""

    def __init__(self, now: datetime = NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def make_timer():
    """TimerSchema 생성 헬퍼 (기본값: 현재 활성 fixed 전체 대상 타이머)"""

    def _make(**overrides: Any) -> TimerSchema:
        data = {
            "id": 1,
            "shop": SHOP,
            "name": "Flash Sale",
            "kind": TimerKind.FIXED,
            "start_date": datetime(2024, 6, 15, 0, 0, 0, tzinfo=timezone.utc),
            "end_date": datetime(2024, 6, 16, 0, 0, 0, tzinfo=timezone.utc),
            "duration_seconds": None,
            "target_type": TargetType.ALL,
            "target_ids": [],
            "priority": 0,
            "status": TimerStatus.ACTIVE,
            "customization": {},
            "created_at": datetime(2024, 6, 1, 0, 0, 0, tzinfo=timezone.utc),
        }
        if overrides.get("kind") == TimerKind.EVERGREEN:
            data.update(start_date=None, end_date=None, duration_seconds=3600)
        data.update(overrides)
        return TimerSchema(**data)

    return _make


@pytest.fixture
def session_factory():
    """in-memory SQLite 세션 팩토리 (모든 세션이 같은 커넥션 공유)"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[Timer.__table__])
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()
