"""SQLite database connection and schema migrations."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from daybook.core.config import DATABASE_PATH, SQLITE_TIMEOUT, SQLITE_WAL
from daybook.storage.errors import StorageUnavailable
from daybook.storage.schema import (
    COLLECTIONS,
    MIGRATIONS,
    SCHEMA_VERSION,
    CollectionSpec,
)

logger = logging.getLogger(__name__)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied schema version, 0 for a fresh database."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS _schema_versions (
            version INTEGER PRIMARY KEY,
            applied_at TEXT NOT NULL
        )
    """)
    row = conn.execute("SELECT MAX(version) FROM _schema_versions").fetchone()
    return row[0] or 0


def run_migrations(
    conn: sqlite3.Connection,
    schema: tuple[CollectionSpec, ...] = COLLECTIONS,
    target_version: int = SCHEMA_VERSION,
) -> int:
    """
    Apply pending schema migrations up to target_version.

    Args:
        conn: Open SQLite connection
        schema: Collections to create
        target_version: Version this code understands

    Returns:
        Schema version after migrating

    Raises:
        StorageUnavailable: The database was written by a newer schema version
    """
    current = get_schema_version(conn)
    conn.commit()

    if current > target_version:
        raise StorageUnavailable(
            f"Database schema version {current} is newer than supported "
            f"version {target_version}"
        )

    for version in range(current + 1, target_version + 1):
        logger.info("Applying schema migration: v%d", version)
        try:
            MIGRATIONS[version](conn, schema)
            conn.execute(
                "INSERT INTO _schema_versions (version, applied_at) VALUES (?, ?)",
                (version, datetime.now().isoformat()),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        logger.info("Schema migration applied: v%d", version)

    return max(current, target_version)


def connect(db_path: Path | str | None = None) -> sqlite3.Connection:
    """
    Open a database connection, creating the file and its directory if absent.

    Args:
        db_path: Path to SQLite database (defaults to DATABASE_PATH)

    Raises:
        StorageUnavailable: The location cannot be created or opened
    """
    path = Path(db_path) if db_path else DATABASE_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path, timeout=SQLITE_TIMEOUT, check_same_thread=False)
    except (OSError, sqlite3.Error) as exc:
        raise StorageUnavailable(f"Cannot open database at {path}: {exc}") from exc

    try:
        if SQLITE_WAL:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
        else:
            # Switch a WAL database back to rollback journaling
            conn.execute("PRAGMA journal_mode=DELETE")
    except sqlite3.Error as exc:
        conn.close()
        raise StorageUnavailable(f"Cannot open database at {path}: {exc}") from exc

    conn.row_factory = sqlite3.Row
    return conn
