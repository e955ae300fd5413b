"""
Engine and session factory for the SQL key-value backend.

The debounced writer saves from a timer thread, so SQLite connections are
opened with ``check_same_thread=False``; every other URL uses the defaults.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from hentrack.core.config import get_settings

Base = declarative_base()


def _connect_args(url: str) -> dict:
    if make_url(url).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


@lru_cache
def get_engine() -> Engine:
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be set when HENTRACK_STORAGE=sql")
    return create_engine(url, pool_pre_ping=True, connect_args=_connect_args(url))


@lru_cache
def _get_sessionmaker() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session; uncommitted work is rolled back if the block raises."""
    session: Session = _get_sessionmaker()()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
