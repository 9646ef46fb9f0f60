"""Shared types and data structures for Daybook."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class EnsureResult(StrEnum):
    """Outcome of ensuring a journal exists."""

    CREATED = "created"
    EXISTED = "existed"


class EntityKind(StrEnum):
    """Entities that can be deleted individually."""

    MEMO = "memo"
    TASK = "task"


def _text(value: Any) -> str:
    """Stored text as a string; missing or falsy values become ""."""
    return str(value) if value else ""


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class Journal:
    """One day's journal, identified by its unique title."""

    journal_key: int
    title: str
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Journal:
        """Build from a stored record."""
        return cls(
            journal_key=record["journal_key"],
            title=_text(record.get("title")),
            created_at=_parse_timestamp(record.get("created_at")),
        )


@dataclass(frozen=True)
class Memo:
    """Free-text note attached to a journal."""

    memo_key: int
    text: str
    journal_title: str
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Memo:
        """Build from a stored record."""
        return cls(
            memo_key=record["memo_key"],
            text=_text(record.get("text")),
            journal_title=_text(record.get("journal_title")),
            created_at=_parse_timestamp(record.get("created_at")),
        )


@dataclass(frozen=True)
class Task:
    """Task attached to a journal. done is stored as 0 or 1."""

    task_key: int
    title: str
    journal_title: str
    done: int = 0
    created_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return bool(self.done)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Task:
        """Build from a stored record."""
        return cls(
            task_key=record["task_key"],
            title=_text(record.get("title")),
            journal_title=_text(record.get("journal_title")),
            done=1 if record.get("done") else 0,
            created_at=_parse_timestamp(record.get("created_at")),
        )
