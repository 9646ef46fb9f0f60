"""Storage layer for Daybook - SQLite-backed document store."""

from daybook.storage.engine import StorageEngine
from daybook.storage.errors import (
    ConstraintViolation,
    DeviceFailure,
    KeyRequired,
    StorageError,
    StorageUnavailable,
    UnknownCollection,
    UnknownIndex,
)
from daybook.storage.schema import (
    COLLECTIONS,
    JOURNALS,
    MEMOS,
    SCHEMA_VERSION,
    TASKS,
    CollectionSpec,
    IndexSpec,
)

__all__ = [
    "StorageEngine",
    "StorageError",
    "StorageUnavailable",
    "ConstraintViolation",
    "DeviceFailure",
    "KeyRequired",
    "UnknownCollection",
    "UnknownIndex",
    "COLLECTIONS",
    "JOURNALS",
    "MEMOS",
    "TASKS",
    "SCHEMA_VERSION",
    "CollectionSpec",
    "IndexSpec",
]
