from __future__ import annotations

import os
from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with FK enforcement off; cascades depend on it.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _connect_args(url: str) -> dict:
    # Timestamp columns are zone-less UTC; now() defaults follow the session time zone.
    if url.startswith("postgresql+asyncpg"):
        return {"server_settings": {"timezone": "UTC"}}
    return {}


def _initialize(database_url: str | None = None) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    global _engine, _sessionmaker
    if _engine is not None and _sessionmaker is not None:
        return _engine, _sessionmaker

    url = database_url or get_database_url()
    engine = create_async_engine(
        url,
        echo=os.getenv("LIFTLOG_SQL_ECHO") == "1",
        pool_pre_ping=not url.startswith("sqlite"),
        connect_args=_connect_args(url),
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    _engine, _sessionmaker = engine, factory
    return engine, factory


def init_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the process-wide engine and session factory once.

    Later calls return the existing engine until ``dispose_engine`` runs.
    """
    engine, _ = _initialize(database_url)
    return engine


def get_engine() -> AsyncEngine:
    engine, _ = _initialize()
    return engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    _, factory = _initialize()
    return factory


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_sessionmaker()() as db:
        yield db
