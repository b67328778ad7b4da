"""SQLite database client wrapper with CRUD operations."""

import asyncio
import json
import logging
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from household_notify.core.config import constants, settings


logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _validate_identifier(name: str, kind: str = "collection") -> None:
    """Validate that a table or column name contains only alphanumeric characters and underscores."""
    if not _IDENTIFIER_PATTERN.match(name):
        msg = f"Invalid {kind} name: {name}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def _encode_value(value: Any) -> Any:
    """Convert Python values to something SQLite can store."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict | list):
        return json.dumps(value)
    return value


def _row_to_record(cursor: aiosqlite.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    columns = [description[0] for description in cursor.description]
    record = dict(zip(columns, row, strict=True))
    # Integer primary keys are exposed as strings so every record id has one type
    if isinstance(record.get("id"), int):
        record["id"] = str(record["id"])
    return record


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_lock = asyncio.Lock()


def _cache_key(db_path: str | None) -> tuple[int, int, str]:
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    return (thread_id, loop_id, str(get_db_path(db_path)))


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    cache_key = _cache_key(db_path)

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path = get_db_path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA foreign_keys = ON")
        await conn.execute("PRAGMA journal_mode = WAL")

        _db_connections[cache_key] = conn

        logger.info("Created new SQLite connection", extra={"db_path": str(path)})
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    cache_key = _cache_key(db_path)

    if cache_key not in _db_connections:
        return

    try:
        async with _db_lock:
            conn = _db_connections.pop(cache_key, None)
            if conn is not None:
                await conn.close()
                logger.info("Closed SQLite connection", extra={"db_path": cache_key[2]})
    except Exception as e:
        logger.warning("Error closing SQLite connection", extra={"error": str(e)})


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from household_notify.core import schema  # noqa: PLC0415 - schema imports this module

    await schema.init_db(db_path=db_path)


async def create_record(*, collection: str, data: dict[str, Any], db_path: str | None = None) -> dict[str, Any]:
    """Insert a new record and return it as stored."""
    _validate_identifier(collection)
    for key in data:
        _validate_identifier(key, "column")

    try:
        conn = await get_connection(db_path=db_path)

        columns_str = ", ".join(data)
        placeholders_str = ", ".join("?" for _ in data)
        values = [_encode_value(value) for value in data.values()]

        query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608 - validated
        cursor = await conn.execute(query, values)
        await conn.commit()

        record_id = data.get("id", cursor.lastrowid)
        logger.info("Created record", extra={"collection": collection, "record_id": record_id})
        return await get_record(collection=collection, record_id=str(record_id), db_path=db_path)
    except aiosqlite.OperationalError as e:
        if "no such table" in str(e):
            msg = f"Table '{collection}' does not exist. Call init_db() first."
            raise RuntimeError(msg) from e
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        raise RuntimeError(f"Failed to create record in {collection}: {e}") from e
    except aiosqlite.IntegrityError as e:
        logger.warning("create_record_conflict", extra={"collection": collection, "error": str(e)})
        raise ValueError(f"Record conflicts with an existing row in {collection}: {e}") from e


async def get_record(*, collection: str, record_id: str, db_path: str | None = None) -> dict[str, Any]:
    """Fetch a single record by ID, raising KeyError if not found."""
    _validate_identifier(collection)
    try:
        conn = await get_connection(db_path=db_path)

        query = f"SELECT * FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        raise RuntimeError(f"Failed to get record from {collection}: {e}") from e

    if row is None:
        raise KeyError(f"Record not found in {collection}: {record_id}")

    logger.debug("Retrieved record", extra={"collection": collection, "record_id": record_id})
    return _row_to_record(cursor, row)


async def delete_record(*, collection: str, record_id: str, db_path: str | None = None) -> None:
    """Delete a record by ID, raising KeyError if not found."""
    _validate_identifier(collection)
    try:
        conn = await get_connection(db_path=db_path)

        query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        await conn.commit()
    except Exception as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        raise RuntimeError(f"Failed to delete record from {collection}: {e}") from e

    if cursor.rowcount == 0:
        raise KeyError(f"Record not found in {collection}: {record_id}")

    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def list_records(
    *,
    collection: str,
    where: dict[str, Any] | None = None,
    sort: str = "id",
    per_page: int | None = constants.DEFAULT_PER_PAGE_LIMIT,
    db_path: str | None = None,
) -> list[dict[str, Any]]:
    """List records matching every equality condition in ``where``.

    Pass ``per_page=None`` to return every matching row.
    """
    _validate_identifier(collection)
    _validate_identifier(sort, "sort column")
    conditions = where or {}
    for key in conditions:
        _validate_identifier(key, "column")

    where_clause = ""
    if conditions:
        where_clause = "WHERE " + " AND ".join(f"{key} = ?" for key in conditions)
    params = [_encode_value(value) for value in conditions.values()]
    limit_clause = ""
    if per_page is not None:
        limit_clause = "LIMIT ?"
        params.append(per_page)

    try:
        conn = await get_connection(db_path=db_path)

        # Identifiers are validated above
        query = f"SELECT * FROM {collection} {where_clause} ORDER BY {sort} ASC {limit_clause}"  # noqa: S608
        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()
    except Exception as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        raise RuntimeError(f"Failed to list records from {collection}: {e}") from e

    records = [_row_to_record(cursor, row) for row in rows]
    logger.debug("Listed records", extra={"collection": collection, "count": len(records)})
    return records


async def get_first_record(
    *, collection: str, where: dict[str, Any], db_path: str | None = None
) -> dict[str, Any] | None:
    """Return the first record matching ``where``, or None."""
    records = await list_records(collection=collection, where=where, per_page=1, db_path=db_path)
    return records[0] if records else None
