"""
샘플 타이머 시드 스크립트
개발용 상점에 fixed/evergreen 타이머를 대상 유형별로 생성
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import timedelta

from timerapi.database.session import session_scope
from timerapi.schemas.timer import TimerCreate
from timerapi.services.timer_service import TimerService
from timerapi.utils.timezone_utils import get_utc_now

DEFAULT_SHOP = "demo-store.myshopify.com"


def build_sample_timers():
    now = get_utc_now()
    return [
        TimerCreate(
            name="Storewide Flash Sale",
            kind="fixed",
            start_date=now - timedelta(hours=1),
            end_date=now + timedelta(days=1),
            target_type="all",
            priority=0,
            status="active",
        ),
        TimerCreate(
            name="Summer Collection Countdown",
            kind="fixed",
            start_date=now - timedelta(minutes=30),
            end_date=now + timedelta(hours=6),
            target_type="collections",
            target_ids=["summer-2025"],
            priority=5,
            status="active",
            customization={"background_color": "#0055ff", "title": "Summer Sale"},
        ),
        TimerCreate(
            name="Sneaker Drop",
            kind="fixed",
            start_date=now + timedelta(days=2),
            end_date=now + timedelta(days=3),
            target_type="products",
            target_ids=["sneaker-001", "sneaker-002"],
            priority=10,
            status="active",
        ),
        TimerCreate(
            name="Visitor Offer",
            kind="evergreen",
            duration_seconds=900,
            target_type="products",
            target_ids=["gift-card"],
            status="active",
            customization={"message": "Your offer expires in"},
        ),
        TimerCreate(
            name="Black Friday (draft)",
            kind="fixed",
            start_date=now + timedelta(days=30),
            end_date=now + timedelta(days=31),
            status="draft",
        ),
    ]


def seed_timers(shop: str = DEFAULT_SHOP):
    """샘플 타이머 시드"""
    with session_scope() as db:
        service = TimerService(db)
        for payload in build_sample_timers():
            timer = service.create_timer(shop, payload)
            print(f"✅ {timer.name} (id={timer.id}, {timer.kind.value}, {timer.status.value})")

    print(f"🏪 상점: {shop}")


if __name__ == "__main__":
    seed_timers(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_SHOP)
