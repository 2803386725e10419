"""
Database Session Management

Provides the sync engine and sessions shared by the API, the compliance
worker and scripts.
"""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from shared.utils.config import get_settings

settings = get_settings()


def _engine_kwargs() -> dict[str, Any]:
    """Pool settings differ between PostgreSQL and SQLite."""
    if settings.is_sqlite:
        # Sessions may be opened from FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_engine(
    settings.postgres_url,
    echo=settings.debug,
    **_engine_kwargs(),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    Get a database session.

    Commits on success, rolls back and re-raises on error.

    Usage:
        with get_db() as db:
            db.execute(...)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
