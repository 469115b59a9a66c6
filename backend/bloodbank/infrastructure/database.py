"""Database Session Manager — async connection pool with rollback and error translation.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - SQLAlchemy exceptions surface as BloodBankError subclasses (core/errors.py):
      unique-constraint violations as ConflictError, everything else as DatabaseError
    - Connection pool uses pool_pre_ping for stale connection detection

Design Decisions:
    - Singleton db_manager initialized on startup by the FastAPI lifespan
    - expire_on_commit=False: read views are built after commit without lazy reloads
    - SQLite URLs skip pool sizing (aiosqlite uses a static pool)
    - Services check uniqueness before writing; the unique-violation mapping only
      catches races between that check and the commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from bloodbank.core.errors import BloodBankError, ConflictError, DatabaseError

logger = logging.getLogger(__name__)

# First match wins; order is most to least specific.
_DB_ERRORS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)

_UNIQUE_MARKERS = ("unique constraint", "duplicate key")


def translate_db_error(exc: SQLAlchemyError) -> BloodBankError:
    """Map a SQLAlchemy exception onto the domain error hierarchy."""
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig).lower()
        if any(marker in detail for marker in _UNIQUE_MARKERS):
            return ConflictError("Resource already exists")
    for exc_type, message, operation in _DB_ERRORS:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that roll back on failure."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = translate_db_error(e)
            logger.error(
                f"DB error: {e}",
                extra={"error_code": error.code},
            )
            raise error from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Ping the database; False when it cannot be reached."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except (BloodBankError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
