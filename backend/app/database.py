"""
Quizo Backend — Persistence Gateway
====================================

What:  Async SQLAlchemy engine, session factory, FastAPI session dependency,
       and the single statement executor used by every service.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success, rolls back on error and always
       closes, and wraps statement execution so driver failures surface as
       application exceptions.
Who:   Used by route handlers via FastAPI's dependency injection system and
       by services through `execute()`.
When:  Engine is created at module import; sessions are created per-request.

Parameter binding:
    Services only ever pass SQLAlchemy Core/ORM constructs (select, insert,
    update, delete) to `execute()`. Every value inside them is sent to the
    driver as a bound parameter; SQL is never built by string formatting.

Connection lifecycle:
    A session checks a connection out of the pool on its first statement and
    returns it when the session closes. `get_db_session` closes in `finally`,
    so the connection goes back on every exit path.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.exc import (
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Executable

from app.config import settings
from app.exceptions import DatabaseError, StoreUnavailableError

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """
    Build create_async_engine() keyword arguments from settings.

    SQLite (used by the test suite) picks its own pool class and rejects
    pool sizing arguments, so those are only passed for server databases.
    """
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if settings.is_sqlite:
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    if settings.db_ssl:
        options["connect_args"] = {"ssl": "require"}
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM objects stay readable after commit,
# when the response model is built from them
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata)."""
    pass


# ── Statement Executor ────────────────────────────────────────────────────
async def execute(db: AsyncSession, statement: Executable) -> Result:
    """
    Execute one statement on the session, translating driver failures.

    What:    The only place services touch the database driver.
    How:     Connectivity problems become StoreUnavailableError; any other
             SQLAlchemy failure becomes DatabaseError. Nothing is retried.

    Args:
        db: Session borrowed for the current request
        statement: A SQLAlchemy construct with bound parameters

    Returns:
        The SQLAlchemy Result; callers fetch rows before the session closes.

    Raises:
        StoreUnavailableError: The store could not be reached (→ 500)
        DatabaseError: The statement failed inside the store (→ 500)
    """
    try:
        return await db.execute(statement)
    except (OperationalError, InterfaceError, PoolTimeoutError, OSError) as e:
        logger.error("Store unreachable: %s", e.__class__.__name__, exc_info=True)
        raise StoreUnavailableError(
            context={"error_type": type(e).__name__}
        ) from e
    except SQLAlchemyError as e:
        logger.error("Statement failed: %s", str(e), exc_info=True)
        raise DatabaseError(
            context={"error_type": type(e).__name__}
        ) from e


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/quizzes/{quiz_id}")
        async def get_quiz(quiz_id: int, db: AsyncSession = Depends(get_db_session)):
            return await quiz_service.get_by_id(db, quiz_id)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping() -> bool:
    """Run SELECT 1 on a pooled connection; False if the store is unreachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database ping failed: %s", str(e))
        return False


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
