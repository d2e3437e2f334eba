"""Database Error Mapping: integrity classification, store_errors, bounded engines.

Invariants:
    - SQLSTATE 23503/23505 (PostgreSQL) and SQLite message text classify the same way
    - store_errors turns connectivity/timeout failures into StoreUnavailableError
    - Non-transient driver errors (DataError) are never reported as unavailable
    - store_errors lets IntegrityError through untouched
    - Non-SQLite engines get pool and driver timeouts
"""

import asyncio

import pytest
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError

from latt.core.errors import StoreUnavailableError
from latt.infrastructure.database import (
    DatabaseSessionManager, classify_integrity_error, engine_options, store_errors,
)


class _PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__("constraint")
        self.sqlstate = sqlstate


def _integrity(orig) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


@pytest.mark.parametrize("orig, expected", [
    (_PgError("23503"), "foreign_key"),
    (_PgError("23505"), "unique"),
    (Exception("FOREIGN KEY constraint failed"), "foreign_key"),
    (Exception("UNIQUE constraint failed: services.lookup_key"), "unique"),
    (Exception("CHECK constraint failed: price"), "other"),
])
def test_classify_integrity_error(orig, expected):
    assert classify_integrity_error(_integrity(orig)) == expected


def test_store_errors_maps_operational_error():
    with pytest.raises(StoreUnavailableError) as exc:
        with store_errors("service lookup"):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert exc.value.operation == "service lookup"
    assert exc.value.http_status == 503


def test_store_errors_maps_interface_error():
    with pytest.raises(StoreUnavailableError):
        with store_errors("subscription delete"):
            raise InterfaceError("DELETE ...", {}, Exception("connection is closed"))


def test_store_errors_maps_invalidated_connection():
    with pytest.raises(StoreUnavailableError):
        with store_errors("subscription delete"):
            raise DataError(
                "DELETE ...", {}, Exception("server closed"), connection_invalidated=True,
            )


def test_store_errors_passes_data_error_through():
    with pytest.raises(DataError):
        with store_errors("subscription delete"):
            raise DataError("DELETE ...", {}, Exception("value out of int32 range"))


def test_store_errors_maps_timeout():
    with pytest.raises(StoreUnavailableError):
        with store_errors("subscription insert"):
            raise asyncio.TimeoutError()


def test_store_errors_passes_integrity_error_through():
    with pytest.raises(IntegrityError):
        with store_errors("service insert"):
            raise _integrity(Exception("UNIQUE constraint failed"))


def test_postgres_engine_options_are_bounded():
    opts = engine_options(
        "postgresql+asyncpg://u:p@localhost/latt_db", pool_size=3, max_overflow=1, timeout=2.5,
    )
    assert opts["pool_timeout"] == 2.5
    assert opts["connect_args"] == {"timeout": 2.5, "command_timeout": 2.5}
    assert opts["pool_size"] == 3


def test_sqlite_engine_options_skip_pool_sizing():
    opts = engine_options("sqlite+aiosqlite:///:memory:", 3, 1, 2.5)
    assert opts == {"connect_args": {"timeout": 2.5}}


async def test_sqlite_enforces_foreign_keys(test_db):
    from sqlalchemy import text

    result = await test_db.execute(text("PRAGMA foreign_keys"))
    assert result.scalar_one() == 1


def _manager(test_engine, test_session_factory) -> DatabaseSessionManager:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


async def test_session_maps_operational_error(test_engine, test_session_factory):
    manager = _manager(test_engine, test_session_factory)

    with pytest.raises(StoreUnavailableError):
        async with manager.session():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))


async def test_session_passes_data_error_through(test_engine, test_session_factory):
    manager = _manager(test_engine, test_session_factory)

    with pytest.raises(DataError):
        async with manager.session():
            raise DataError("DELETE ...", {}, Exception("value out of int32 range"))
