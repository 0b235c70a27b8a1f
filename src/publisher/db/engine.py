"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

The engine is built by create_app() from the app's Settings and kept on
app.state, so two apps with different settings never share a pool.
The pool has a fixed capacity (no overflow). When every connection is
busy, a request waits up to db_pool_timeout_seconds for one to free up
instead of opening a new connection.
"""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from publisher.config import Settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create the engine described by the settings.

    SQLite (tests, local experiments) uses SQLAlchemy's default pool and
    ignores the sizing options.
    """
    if config.database_url.startswith("sqlite"):
        return create_async_engine(config.database_url, echo=config.debug)

    return create_async_engine(
        config.database_url,
        echo=config.debug,
        pool_size=config.db_pool_size,
        max_overflow=0,
        pool_timeout=config.db_pool_timeout_seconds,
        pool_recycle=config.db_pool_recycle_seconds,
        pool_pre_ping=True,
        connect_args={"timeout": config.db_connect_timeout_seconds},
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory — each request gets its own session."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
