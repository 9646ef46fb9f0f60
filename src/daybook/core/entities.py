"""Memo and task operations scoped to the active journal."""

import logging
from datetime import datetime

from daybook.core.journals import JournalSession
from daybook.core.types import EntityKind, Memo, Task
from daybook.storage.engine import StorageEngine
from daybook.storage.schema import MEMOS, TASKS

logger = logging.getLogger(__name__)

_COLLECTIONS = {
    EntityKind.MEMO: MEMOS.name,
    EntityKind.TASK: TASKS.name,
}


class EmptyTextError(ValueError):
    """Raised when memo or task text is blank."""


def _require_text(text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise EmptyTextError("Text must not be empty")
    return text


class EntityOperations:
    """CRUD helpers for memos and tasks."""

    def __init__(self, engine: StorageEngine, session: JournalSession):
        """
        Initialize entity operations.

        Args:
            engine: Open storage engine
            session: Supplies the active journal for new records
        """
        self.engine = engine
        self.session = session

    async def add_memo(self, text: str) -> Memo:
        """Add a memo to the active journal."""
        record = {
            "text": _require_text(text),
            "journal_title": self.session.active_title,
            "created_at": datetime.now().isoformat(),
        }
        record[MEMOS.key_field] = await self.engine.insert(MEMOS.name, record)
        return Memo.from_record(record)

    async def edit_memo(self, memo_key: int, text: str) -> Memo | None:
        """
        Replace a memo's text.

        Returns:
            The updated memo, or None if it does not exist

        Raises:
            EmptyTextError: text is blank; the stored memo is left untouched
        """
        text = _require_text(text)
        record = await self.engine.get(MEMOS.name, memo_key)
        if record is None:
            logger.debug("Memo %s not found, nothing to edit", memo_key)
            return None

        updated = {**record, "text": text}
        await self.engine.put(MEMOS.name, updated)
        return Memo.from_record(updated)

    async def add_task(self, title: str) -> Task:
        """Add an open task to the active journal."""
        record = {
            "title": _require_text(title),
            "done": 0,
            "journal_title": self.session.active_title,
            "created_at": datetime.now().isoformat(),
        }
        record[TASKS.key_field] = await self.engine.insert(TASKS.name, record)
        return Task.from_record(record)

    async def toggle_done(self, task_key: int) -> Task | None:
        """Flip a task between done and not done. None if it does not exist."""
        record = await self.engine.get(TASKS.name, task_key)
        if record is None:
            logger.debug("Task %s not found, nothing to toggle", task_key)
            return None

        updated = {**record, "done": 0 if record.get("done") else 1}
        await self.engine.put(TASKS.name, updated)
        return Task.from_record(updated)

    async def delete_entity(self, kind: EntityKind, key: int) -> None:
        """Delete a memo or task by key. Missing keys are ignored."""
        await self.engine.delete_by_key(_COLLECTIONS[EntityKind(kind)], key)

    async def list_memos(self) -> list[Memo]:
        """Get the active journal's memos in creation order."""
        rows = await self.engine.fetch_by_index(
            MEMOS.name, "journal_title", self.session.active_title
        )
        return sorted((Memo.from_record(row) for row in rows), key=lambda m: m.memo_key)

    async def list_tasks(self, hide_done: bool = False) -> list[Task]:
        """
        Get the active journal's tasks in creation order.

        Args:
            hide_done: Leave out completed tasks
        """
        rows = await self.engine.fetch_by_index(
            TASKS.name, "journal_title", self.session.active_title
        )
        tasks = sorted((Task.from_record(row) for row in rows), key=lambda t: t.task_key)
        if hide_done:
            tasks = [t for t in tasks if not t.is_done]
        return tasks
