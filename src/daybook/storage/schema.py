"""Collection schema registry and versioned migrations.

Each collection is a table keyed by an autoincrement integer. Indexed fields
get their own column (so SQLite can index them); the full record lives in the
``doc`` column as JSON.
"""

import sqlite3
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class IndexSpec:
    """Secondary index over one record field."""

    name: str
    field: str
    unique: bool = False


@dataclass(frozen=True)
class CollectionSpec:
    """Static description of one collection.

    With auto_increment off, records must carry their own key.
    """

    name: str
    key_field: str
    auto_increment: bool = True
    indexes: tuple[IndexSpec, ...] = ()

    def index(self, name: str) -> IndexSpec | None:
        """Look up an index by name."""
        for spec in self.indexes:
            if spec.name == name:
                return spec
        return None


JOURNALS = CollectionSpec(
    name="journals",
    key_field="journal_key",
    indexes=(IndexSpec("title", "title", unique=True),),
)

MEMOS = CollectionSpec(
    name="memos",
    key_field="memo_key",
    indexes=(IndexSpec("journal_title", "journal_title"),),
)

TASKS = CollectionSpec(
    name="tasks",
    key_field="task_key",
    indexes=(
        IndexSpec("journal_title", "journal_title"),
        IndexSpec("done", "done"),
    ),
)

COLLECTIONS: tuple[CollectionSpec, ...] = (JOURNALS, MEMOS, TASKS)

# Bump together with a new MIGRATIONS entry
SCHEMA_VERSION = 1


def index_column(index: IndexSpec) -> str:
    """Column name backing an index."""
    return f"ix_{index.name}"


def _create_collection(conn: sqlite3.Connection, spec: CollectionSpec) -> None:
    key_type = "INTEGER PRIMARY KEY"
    if spec.auto_increment:
        key_type += " AUTOINCREMENT"

    # Index columns are untyped so stored values keep their exact type
    columns = [f'"{spec.key_field}" {key_type}']
    columns += [f'"{index_column(index)}"' for index in spec.indexes]
    columns.append("doc TEXT NOT NULL")

    conn.execute(
        f'CREATE TABLE IF NOT EXISTS "{spec.name}" ({", ".join(columns)})'
    )
    for index in spec.indexes:
        unique = "UNIQUE " if index.unique else ""
        conn.execute(
            f'CREATE {unique}INDEX IF NOT EXISTS "idx_{spec.name}_{index.name}" '
            f'ON "{spec.name}" ("{index_column(index)}")'
        )


def _v1_create_collections(
    conn: sqlite3.Connection, schema: tuple[CollectionSpec, ...]
) -> None:
    """Create every declared collection with its indexes."""
    for spec in schema:
        _create_collection(conn, spec)


Migration = Callable[[sqlite3.Connection, tuple[CollectionSpec, ...]], None]

MIGRATIONS: dict[int, Migration] = {
    1: _v1_create_collections,
}
