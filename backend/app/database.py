"""
Books API - Database Session Management
=========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
How:   The engine (and its connection pool) is created explicitly by
       `init_engine()` during application startup and released by
       `dispose_engine()` at shutdown. Each request gets its own session that
       commits on success and rolls back on error.
Who:   The lifespan handler in main.py, route dependencies, and tests.

Connection Pooling Strategy:
    pool_size / max_overflow:  from settings, server databases only
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
    SQLite:                    SQLAlchemy's default pool for the driver
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import is_sqlite_url, settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models, `create_schema()` and
    Alembic's autogenerate.
    """
    pass


# ── Engine State ──────────────────────────────────────────────────────────
# Populated by init_engine(), cleared by dispose_engine().
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for `database_url`.

    Pool sizing arguments are rejected by the pools SQLAlchemy uses for
    SQLite, so they are only passed for server databases.
    """
    engine_kwargs: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.db_echo,
    }
    if not is_sqlite_url(database_url):
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps attributes readable after the request commits
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the process-wide engine and session factory.

    Called once from the application lifespan. Calling it again replaces
    the previous engine without disposing it; use dispose_engine() first.
    """
    global _engine, _session_factory
    url = database_url or settings.database_url
    _engine = build_engine(url)
    _session_factory = build_session_factory(_engine)
    logger.info("Database engine initialized (%s)", _engine.url.render_as_string(hide_password=True))
    return _engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database engine is not initialized; call init_engine() first")
    return _engine


async def create_schema(engine: Optional[AsyncEngine] = None) -> None:
    """
    Create all tables known to `Base.metadata` that do not exist yet.

    Used at startup when `auto_create_schema` is on, and by the test suite.
    """
    # Registers the models on Base.metadata
    import app.models.book  # noqa: F401

    target = engine or get_engine()
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/books")
        async def list_books(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    if _session_factory is None:
        raise RuntimeError("Database engine is not initialized; call init_engine() first")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    Gracefully close all connections in the pool.

    Called during application shutdown. Safe to call when no engine exists.
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None
