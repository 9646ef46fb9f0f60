"""Daybook - daily journal, memos and tasks over a local document store."""

from daybook.core import (
    EmptyTextError,
    EnsureResult,
    EntityKind,
    EntityOperations,
    Journal,
    JournalSession,
    Memo,
    Task,
)
from daybook.storage import (
    ConstraintViolation,
    DeviceFailure,
    StorageEngine,
    StorageError,
    StorageUnavailable,
)

__version__ = "0.1.0"

__all__ = [
    "ConstraintViolation",
    "DeviceFailure",
    "EmptyTextError",
    "EnsureResult",
    "EntityKind",
    "EntityOperations",
    "Journal",
    "JournalSession",
    "Memo",
    "StorageEngine",
    "StorageError",
    "StorageUnavailable",
    "Task",
]
