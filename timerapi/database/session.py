from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.orm import Session

from timerapi.database.connection import SessionLocal

SessionFactory = Callable[[], Session]


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def session_scope(session_factory: SessionFactory = SessionLocal) -> Iterator[Session]:
    """요청 범위 밖(스케줄러, 백그라운드 작업, 스크립트)에서 쓰는 세션 관리

    커밋은 리포지토리가 레코드 단위로 수행하므로 여기서는 정리만 담당합니다.
    """
    db = session_factory()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()
