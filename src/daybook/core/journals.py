"""Journal lifecycle: get-or-create, switching, and cascading delete.

The active journal lives on a JournalSession owned by the caller rather than
in module state. Cascading delete is a sequence of single-collection
operations; a storage failure midway leaves the remaining records in place.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from daybook.core.types import EnsureResult, Journal
from daybook.storage.engine import StorageEngine
from daybook.storage.errors import ConstraintViolation, StorageError
from daybook.storage.schema import JOURNALS, MEMOS, TASKS

logger = logging.getLogger(__name__)


def today_iso() -> str:
    """Today's date as YYYY-MM-DD."""
    return date.today().isoformat()


class JournalSession:
    """Tracks the active journal and manages journal records."""

    def __init__(
        self,
        engine: StorageEngine,
        today: Callable[[], str] = today_iso,
        active_title: str | None = None,
    ):
        """
        Initialize journal session.

        Args:
            engine: Open storage engine
            today: Returns the title of today's journal
            active_title: Initial active journal (defaults to today)
        """
        self.engine = engine
        self._today = today
        self.active_title = active_title or today()

    async def ensure_journal(self, title: str | None = None) -> EnsureResult:
        """
        Create the journal if missing and make it active.

        Args:
            title: Journal title (defaults to today's date)

        Returns:
            CREATED if a record was inserted, EXISTED if one already had the title
        """
        title = title if title is not None else self._today()
        try:
            await self.engine.insert(
                JOURNALS.name,
                {"title": title, "created_at": datetime.now().isoformat()},
            )
            result = EnsureResult.CREATED
            logger.info("Created journal %s", title)
        except ConstraintViolation:
            result = EnsureResult.EXISTED

        self.active_title = title
        return result

    def switch_active_journal(self, title: str) -> None:
        """Make title the active journal. Existence is not checked."""
        self.active_title = title

    async def delete_journal_cascade(self, title: str) -> bool:
        """
        Delete a journal together with its memos and tasks.

        Each delete is its own transaction. After success the active journal
        is reset to today's.

        Args:
            title: Title of the journal to delete

        Returns:
            True if the journal existed and was deleted, False otherwise
        """
        journals = await self.engine.fetch_all(JOURNALS.name)
        target = next((j for j in journals if j.get("title") == title), None)
        if target is None:
            return False

        memos = await self.engine.fetch_by_index(MEMOS.name, "journal_title", title)
        tasks = await self.engine.fetch_by_index(TASKS.name, "journal_title", title)

        try:
            for memo in memos:
                await self.engine.delete_by_key(MEMOS.name, memo[MEMOS.key_field])
            for task in tasks:
                await self.engine.delete_by_key(TASKS.name, task[TASKS.key_field])
            await self.engine.delete_by_key(JOURNALS.name, target[JOURNALS.key_field])
        except StorageError:
            logger.error(
                "Cascading delete of journal %s stopped partway", title, exc_info=True
            )
            raise

        logger.info(
            "Deleted journal %s with %d memos and %d tasks",
            title,
            len(memos),
            len(tasks),
        )
        await self.ensure_journal()
        return True

    async def list_journals(self, query: str = "") -> list[Journal]:
        """
        Get journals ordered by title, newest first.

        Args:
            query: Case-insensitive substring filter on the title
        """
        rows = await self.engine.fetch_all(JOURNALS.name)
        journals = sorted(
            (Journal.from_record(row) for row in rows),
            key=lambda j: j.title,
            reverse=True,
        )
        needle = query.strip().lower()
        if needle:
            journals = [j for j in journals if needle in j.title.lower()]
        return journals
