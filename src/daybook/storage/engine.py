"""Asynchronous document store over SQLite.

Records are plain dicts persisted as JSON. Every operation touches one
collection, runs in its own transaction, and executes the blocking SQLite
call in a worker thread so callers simply ``await`` it.
"""

import asyncio
import json
import logging
import sqlite3
from collections.abc import Callable
from pathlib import Path
from threading import Lock
from typing import Any, TypeVar

from daybook.storage.db import connect, run_migrations
from daybook.storage.errors import (
    ConstraintViolation,
    DeviceFailure,
    KeyRequired,
    StorageUnavailable,
    UnknownCollection,
    UnknownIndex,
)
from daybook.storage.schema import COLLECTIONS, CollectionSpec, index_column

logger = logging.getLogger(__name__)

T = TypeVar("T")

Record = dict[str, Any]

# SQLite INTEGER range
_MIN_INT = -(2**63)
_MAX_INT = 2**63 - 1


def _fits_integer(value: Any) -> bool:
    return not isinstance(value, int) or _MIN_INT <= value <= _MAX_INT


def _index_value(value: Any) -> Any:
    """Return value if it can be indexed, else None (record left out of index)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)) and _fits_integer(value):
        return value
    return None


class StorageEngine:
    """Document store with secondary indexes, one shared connection."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        schema: tuple[CollectionSpec, ...] = COLLECTIONS,
        db_path: Path | None = None,
    ):
        """
        Wrap an already migrated connection. Use ``StorageEngine.open``.

        Args:
            conn: SQLite connection shared by all operations
            schema: Collections known to this engine
            db_path: Database location, for diagnostics
        """
        self.db_path = db_path
        self._schema = {spec.name: spec for spec in schema}
        self._connection: sqlite3.Connection | None = conn
        self._connection_lock = Lock()

    @classmethod
    async def open(
        cls,
        db_path: Path | str | None = None,
        schema: tuple[CollectionSpec, ...] = COLLECTIONS,
    ) -> "StorageEngine":
        """
        Open (creating if absent) the database and bring its schema up to date.

        Raises:
            StorageUnavailable: No usable storage at db_path, or the stored
                schema is newer than this code
        """

        def _open_sync() -> sqlite3.Connection:
            conn = connect(db_path)
            try:
                run_migrations(conn, schema)
            except sqlite3.Error as exc:
                conn.close()
                raise StorageUnavailable(f"Schema migration failed: {exc}") from exc
            except Exception:
                conn.close()
                raise
            return conn

        conn = await asyncio.to_thread(_open_sync)
        path = Path(db_path) if db_path else None
        logger.debug("Opened document store at %s", path or "default path")
        return cls(conn, schema, path)

    async def close(self) -> None:
        """Close the shared database connection."""

        def _close_sync() -> None:
            with self._connection_lock:
                if self._connection is not None:
                    self._connection.close()
                    self._connection = None

        await asyncio.to_thread(_close_sync)

    def _spec(self, collection: str) -> CollectionSpec:
        try:
            return self._schema[collection]
        except KeyError:
            raise UnknownCollection(collection) from None

    async def _run(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        """Run fn in a worker thread inside one transaction."""

        def _locked() -> T:
            with self._connection_lock:
                conn = self._connection
                if conn is None:
                    raise DeviceFailure("Storage engine is closed")
                try:
                    result = fn(conn)
                    conn.commit()
                    return result
                except sqlite3.IntegrityError as exc:
                    conn.rollback()
                    raise ConstraintViolation(str(exc)) from exc
                except sqlite3.Error as exc:
                    conn.rollback()
                    raise DeviceFailure(str(exc)) from exc
                except Exception:
                    conn.rollback()
                    raise

        return await asyncio.to_thread(_locked)

    @staticmethod
    def _row_to_record(spec: CollectionSpec, row: sqlite3.Row) -> Record:
        record = json.loads(row["doc"])
        record[spec.key_field] = row[spec.key_field]
        return record

    def _write_params(
        self, spec: CollectionSpec, record: Record
    ) -> tuple[list[str], list[Any]]:
        body = {k: v for k, v in record.items() if k != spec.key_field}
        columns = [index_column(index) for index in spec.indexes]
        values = [_index_value(record.get(index.field)) for index in spec.indexes]
        columns.append("doc")
        values.append(json.dumps(body, ensure_ascii=False))
        key = record.get(spec.key_field)
        if key is not None:
            if not _fits_integer(key):
                raise ConstraintViolation(f"Key {key} is out of range for {spec.name}")
            columns.insert(0, spec.key_field)
            values.insert(0, key)
        elif not spec.auto_increment:
            raise KeyRequired(f"{spec.name} records need an explicit {spec.key_field}")
        return columns, values

    async def insert(self, collection: str, record: Record) -> int:
        """
        Add a new record, assigning a key when the key field is absent.

        Returns:
            The record's key

        Raises:
            ConstraintViolation: A unique index value or the key already exists
            KeyRequired: No key given and the collection does not assign keys
        """
        spec = self._spec(collection)
        columns, values = self._write_params(spec, record)
        placeholders = ", ".join("?" for _ in values)
        column_sql = ", ".join(f'"{c}"' for c in columns)

        def _insert(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                f'INSERT INTO "{spec.name}" ({column_sql}) VALUES ({placeholders})',
                values,
            )
            return int(cursor.lastrowid)

        key = await self._run(_insert)
        logger.debug("Inserted %s key=%d", collection, key)
        return key

    async def put(self, collection: str, record: Record) -> int:
        """
        Insert or overwrite a record by its key field.

        Returns:
            The record's key

        Raises:
            ConstraintViolation: Another key already holds a unique index value
        """
        spec = self._spec(collection)
        if record.get(spec.key_field) is None:
            return await self.insert(collection, record)

        columns, values = self._write_params(spec, record)
        placeholders = ", ".join("?" for _ in values)
        column_sql = ", ".join(f'"{c}"' for c in columns)
        updates = ", ".join(
            f'"{c}" = excluded."{c}"' for c in columns if c != spec.key_field
        )

        def _put(conn: sqlite3.Connection) -> int:
            conn.execute(
                f'INSERT INTO "{spec.name}" ({column_sql}) VALUES ({placeholders}) '
                f'ON CONFLICT ("{spec.key_field}") DO UPDATE SET {updates}',
                values,
            )
            return int(record[spec.key_field])

        key = await self._run(_put)
        logger.debug("Put %s key=%d", collection, key)
        return key

    async def delete_by_key(self, collection: str, key: int) -> None:
        """Remove one record. A missing key is not an error."""
        spec = self._spec(collection)
        if not _fits_integer(key):
            return

        def _delete(conn: sqlite3.Connection) -> None:
            conn.execute(
                f'DELETE FROM "{spec.name}" WHERE "{spec.key_field}" = ?', (key,)
            )

        await self._run(_delete)
        logger.debug("Deleted %s key=%s", collection, key)

    async def get(self, collection: str, key: int) -> Record | None:
        """Get one record by key, or None if not exists."""
        spec = self._spec(collection)
        if not _fits_integer(key):
            return None

        def _get(conn: sqlite3.Connection) -> Record | None:
            row = conn.execute(
                f'SELECT * FROM "{spec.name}" WHERE "{spec.key_field}" = ?', (key,)
            ).fetchone()
            return self._row_to_record(spec, row) if row else None

        return await self._run(_get)

    async def fetch_all(self, collection: str) -> list[Record]:
        """Get every record in a collection. Order is unspecified."""
        spec = self._spec(collection)

        def _fetch(conn: sqlite3.Connection) -> list[Record]:
            rows = conn.execute(f'SELECT * FROM "{spec.name}"').fetchall()
            return [self._row_to_record(spec, row) for row in rows]

        return await self._run(_fetch)

    async def fetch_by_index(
        self, collection: str, index_name: str, value: Any
    ) -> list[Record]:
        """Get all records whose indexed field equals value."""
        spec = self._spec(collection)
        index = spec.index(index_name)
        if index is None:
            raise UnknownIndex(f"{collection}.{index_name}")

        lookup = _index_value(value)
        if lookup is None:
            return []

        def _fetch(conn: sqlite3.Connection) -> list[Record]:
            rows = conn.execute(
                f'SELECT * FROM "{spec.name}" WHERE "{index_column(index)}" = ?',
                (lookup,),
            ).fetchall()
            return [self._row_to_record(spec, row) for row in rows]

        return await self._run(_fetch)
