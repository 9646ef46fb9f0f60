"""Daybook core - journal lifecycle and entity operations."""

from daybook.core.entities import EmptyTextError, EntityOperations
from daybook.core.journals import JournalSession, today_iso
from daybook.core.types import EnsureResult, EntityKind, Journal, Memo, Task

__all__ = [
    # Operations
    "EntityOperations",
    "JournalSession",
    "today_iso",
    # Types
    "EmptyTextError",
    "EnsureResult",
    "EntityKind",
    "Journal",
    "Memo",
    "Task",
]
