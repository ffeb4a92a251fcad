"""Database engine and session wiring for cookplan.

The engine is created lazily from settings.database_url (Postgres in
deployments, SQLite for local runs). Routers get a session per request via
get_db; tests swap it out through app.dependency_overrides. Tables are
owned by the alembic migrations under services/api/alembic.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .settings import settings


class Base(DeclarativeBase):
    pass


_engine = None
_SessionLocal = None


def init_engine(database_url: str | None = None):
    """(Re)create the engine and session factory.

    SQLite URLs get check_same_thread disabled so the FastAPI threadpool
    can share connections.
    """
    global _engine, _SessionLocal
    url = database_url or settings.database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    _engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_engine():
    if _engine is None:
        init_engine()
    return _engine


def session_factory():
    if _SessionLocal is None:
        init_engine()
    return _SessionLocal


def get_db():
    db = session_factory()()
    try:
        yield db
    finally:
        db.close()
