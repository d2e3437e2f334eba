"""Database Session Manager: async connection pool with bounded waits and error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Every store wait is bounded by db_timeout_seconds (connect, statement, pool checkout)
    - Connectivity/timeout failures surface as StoreUnavailableError (core/errors.py);
      other driver errors propagate unchanged
    - IntegrityError is classified as foreign-key vs unique before it leaves this module

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - store_errors() is a plain context manager so services can wrap individual awaits
      and still catch IntegrityError themselves (it is re-raised untouched)
    - SQLite gets PRAGMA foreign_keys=ON on every connection; otherwise FKs are not enforced
"""

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Iterator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, DBAPIError, InterfaceError, OperationalError,
    TimeoutError as PoolTimeoutError,
)

from latt.core.errors import (
    ConstraintViolationError, ForeignKeyViolationError, LattError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

_FOREIGN_KEY_SQLSTATE = "23503"
_UNIQUE_SQLSTATE = "23505"

# Connectivity and timeout failures only; DataError, ProgrammingError etc. are not transient
_UNAVAILABLE_ERRORS = (
    OperationalError, InterfaceError, PoolTimeoutError, asyncio.TimeoutError, OSError,
)


def is_store_unavailable(exc: BaseException) -> bool:
    """True for connectivity or timeout failures, which are safe to retry."""
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, _UNAVAILABLE_ERRORS)


def classify_integrity_error(exc: IntegrityError) -> str:
    """Return "foreign_key", "unique" or "other" for an IntegrityError.

    PostgreSQL reports a SQLSTATE on the driver exception (or its cause);
    SQLite only reports message text.
    """
    orig = exc.orig
    sqlstate = (
        getattr(orig, "sqlstate", None)
        or getattr(orig, "pgcode", None)
        or getattr(getattr(orig, "__cause__", None), "sqlstate", None)
    )
    if sqlstate == _FOREIGN_KEY_SQLSTATE:
        return "foreign_key"
    if sqlstate == _UNIQUE_SQLSTATE:
        return "unique"
    message = str(orig).lower()
    if "foreign key" in message:
        return "foreign_key"
    if "unique" in message or "duplicate key" in message:
        return "unique"
    return "other"


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Map connectivity/timeout failures of one store call to StoreUnavailableError.

    IntegrityError passes through unchanged: callers decide what a conflict means.
    Other DBAPI errors (bad data, bad SQL) also propagate: retrying cannot fix them.
    """
    try:
        yield
    except Exception as e:
        if not is_store_unavailable(e):
            raise
        logger.error(
            f"DB {operation} failed: {e}", extra={"operation": operation},
        )
        raise StoreUnavailableError("Database unreachable or timed out", operation) from e


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection of this engine."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def engine_options(
    database_url: str, pool_size: int, max_overflow: int, timeout: float,
) -> dict:
    """create_async_engine kwargs with every wait bounded by `timeout` seconds."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"timeout": timeout}}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": timeout,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {"timeout": timeout, "command_timeout": timeout},
    }


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 5,
        timeout: float = 5.0,
    ):
        self.engine = create_async_engine(
            database_url,
            **engine_options(database_url, pool_size, max_overflow, timeout),
        )
        if self.engine.dialect.name == "sqlite":
            enable_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except LattError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            if classify_integrity_error(e) == "foreign_key":
                raise ForeignKeyViolationError("Referenced record does not exist")
            raise ConstraintViolationError("Integrity constraint violated")
        except Exception as e:
            await session.rollback()
            if not is_store_unavailable(e):
                raise
            logger.error(f"DB operational error: {e}")
            raise StoreUnavailableError("Connection or operational error", "execute")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
