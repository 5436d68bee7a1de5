import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timerapi.database.connection import engine
from timerapi.config import settings
from timerapi.models.base import Base
from timerapi.models import timer  # noqa: F401  테이블 등록


def init_db():
    """데이터베이스 초기화"""
    try:
        # 테이블 생성
        Base.metadata.create_all(bind=engine)
        print(f"Database initialized successfully: {engine.url.render_as_string(hide_password=True)}")
        print(f"Environment: {settings.ENVIRONMENT}")

    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()
