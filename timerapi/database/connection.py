from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from timerapi.config import settings


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # SQLite는 스레드 간 커넥션 공유를 허용해야 스케줄러 워커에서 사용 가능
        return {"connect_args": {"check_same_thread": False}, "echo": settings.DEBUG}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,  # 연결 유효성 검사
        "pool_recycle": 3600,  # 1시간마다 연결 재생성
        "echo": settings.DEBUG,  # 디버그 모드에서 SQL 로깅
    }


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs())

# Use expire_on_commit=False to avoid DetachedInstanceError when accessing
# attributes after commit within the same request scope (common FastAPI pattern).
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)
