"""Repository for the banned_words table."""

from __future__ import annotations

from typing import List

from relaycord.database.db_connection import ConnectionManager
from relaycord.util.logger import get_logger

logger = get_logger("banned_word_repo")


class BannedWordRepository:
    """Append-only store of the custom words added with ``!addbadword``."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._db = connection_manager

    async def list_all(self) -> List[str]:
        rows = await self._db.fetch_all("SELECT word FROM banned_words ORDER BY id")
        return [row["word"] for row in rows]

    async def create(self, word: str) -> str:
        """Persist ``word`` lower-cased and return the stored value."""
        normalized = word.strip().lower()
        if not normalized:
            raise ValueError("Cannot store an empty banned word")

        await self._db.execute("INSERT INTO banned_words (word) VALUES (?)", (normalized,))
        logger.info("[WORD STORE] Stored banned word %r", normalized)
        return normalized
