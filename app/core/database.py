"""Async database engine, session factory and declarative base."""
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def enable_sqlite_savepoints(sync_engine: Engine) -> None:
    """
    Let SQLAlchemy own BEGIN on SQLite connections.

    The sqlite3 driver defers BEGIN until the first DML statement, which
    breaks SAVEPOINT handling used by get-or-create.
    """

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine, applying SQLite-specific setup when needed."""
    engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_savepoints(engine.sync_engine)
    return engine


engine = build_engine(settings.DATABASE_URL, pool_pre_ping=True)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a request-scoped session."""
    async with async_session_maker() as session:
        yield session
