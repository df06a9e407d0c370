"""Database connection and session management."""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, selectinload, Session as OrmSession

from ..settings import APP_DIR
from .models import Base, WorkoutRecord


log = logging.getLogger(__name__)

DB_PATH = APP_DIR / "repclock.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Point the app at another database URL (tests use in-memory SQLite)."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db() -> None:
    """Create any missing tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        log.exception("database transaction rolled back")
        session.rollback()
        raise
    finally:
        session.close()


def recent_workouts(limit: int = 10) -> list[WorkoutRecord]:
    """Most recent workouts first, with their exercise rows loaded."""
    with get_session() as db:
        return (
            db.query(WorkoutRecord)
            .options(selectinload(WorkoutRecord.exercises))
            .order_by(WorkoutRecord.start_time.desc(), WorkoutRecord.id.desc())
            .limit(limit)
            .all()
        )
