"""Database engine + session management.

Repositories open a short-lived session per call and close it in ``finally``.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from .models import Base

_engine: Engine | None = None
_SessionFactory: scoped_session[Session] | None = None


def _normalize_url(url: str) -> str:
    # Normalize postgres schemes to ensure SQLAlchemy uses psycopg v3
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+" not in url.split("://", 1)[1].split("@", 1)[0]:
        return "postgresql+psycopg://" + url[len("postgresql://") :]
    return url


def _build(database_url: str) -> Engine:
    database_url = _normalize_url(database_url)
    kwargs: dict = {"future": True, "echo": False}
    if database_url.startswith("sqlite"):
        # Flask serves requests from several threads
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, **kwargs)


def init_engine(database_url: str, force: bool = False) -> Engine:
    """Initialize global engine (idempotent) or reinitialize when force=True."""
    global _engine, _SessionFactory
    if _engine is not None and not force:
        return _engine
    if _engine is not None:
        _engine.dispose()
        if _SessionFactory is not None:
            with suppress(Exception):  # pragma: no cover
                _SessionFactory.remove()
    _engine = _build(database_url)
    _SessionFactory = scoped_session(
        sessionmaker(bind=_engine, autoflush=False, autocommit=False, expire_on_commit=False)
    )
    return _engine


def get_session() -> Session:
    if _SessionFactory is None:
        raise RuntimeError("DB not initialized; call init_engine first")
    return _SessionFactory()


def remove_session() -> None:
    """Drop the thread-scoped session at request teardown."""
    if _SessionFactory is not None:
        _SessionFactory.remove()


def ping() -> None:
    """Round-trip ``SELECT 1``; raises the driver error when the store is unreachable."""
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    with _engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def create_all() -> None:
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    Base.metadata.create_all(_engine)


def dispose() -> None:
    global _engine, _SessionFactory
    if _SessionFactory is not None:
        _SessionFactory.remove()
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
