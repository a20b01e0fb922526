"""
In-memory banned word filter.

The live word set is the base dictionary from the app config plus every
word persisted with ``!addbadword``. It is a cache of the database, built
with ``load`` at startup and appended to with ``add_word`` afterwards.

Matching is whole-word and case-insensitive: a banned term matches when it
is not glued to other letters, digits or underscores on either side, so
"class" does not trip on "ass". Multi-word terms match as written.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable

from relaycord.repositories.banned_word_repo import BannedWordRepository
from relaycord.util.logger import get_logger

logger = get_logger("word_filter")


def normalize_word(word: str) -> str:
    return " ".join(word.strip().lower().split())


def compile_pattern(words: Iterable[str]) -> re.Pattern | None:
    """Compile one case-insensitive whole-word alternation for ``words``.

    Longer terms come first so "fucking" wins over "fuck" in the match.
    Returns None for an empty word set.
    """
    terms = sorted({w for w in words if w}, key=lambda w: (-len(w), w))
    if not terms:
        return None
    alternation = "|".join(r"\s+".join(re.escape(part) for part in term.split(" ")) for term in terms)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


class WordFilter:
    """Process-wide banned word set with load/add/query operations.

    ``add_word`` swaps in a new frozenset and a new compiled pattern in one
    step each, so a concurrent ``is_profane`` always sees a complete set.
    Adding a word twice is a no-op.
    """

    def __init__(self, word_store: BannedWordRepository | None = None, base_words: Iterable[str] = ()) -> None:
        self._word_store = word_store
        self._base_words: FrozenSet[str] = frozenset(normalize_word(w) for w in base_words if normalize_word(w))
        self._words: FrozenSet[str] = self._base_words
        self._pattern = compile_pattern(self._words)

    @property
    def words(self) -> FrozenSet[str]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and normalize_word(word) in self._words

    def load(self, words: Iterable[str]) -> int:
        """Rebuild the live set from the base dictionary plus ``words``.

        Returns:
            Number of words in the live set after loading.
        """
        loaded = frozenset(n for n in (normalize_word(w) for w in words) if n)
        self._words = self._base_words | loaded
        self._pattern = compile_pattern(self._words)
        logger.info("[WORD FILTER] Loaded %d words (%d custom)", len(self._words), len(loaded))
        return len(self._words)

    async def load_from_store(self) -> int:
        """Rebuild the live set from the persisted banned words."""
        if self._word_store is None:
            return self.load(())
        return self.load(await self._word_store.list_all())

    def add_word(self, word: str) -> bool:
        """Add one term to the live set. Returns False if it was already present."""
        normalized = normalize_word(word)
        if not normalized or normalized in self._words:
            return False
        words = self._words | {normalized}
        self._pattern = compile_pattern(words)
        self._words = words
        logger.debug("[WORD FILTER] Added %r", normalized)
        return True

    async def persist_word(self, word: str) -> str:
        """Store ``word`` in the database and add it to the live set."""
        stored = await self._word_store.create(word) if self._word_store is not None else normalize_word(word)
        self.add_word(stored)
        return stored

    def find_match(self, text: str) -> str | None:
        """Return the first banned term found in ``text``, lower-cased, or None."""
        pattern = self._pattern
        if pattern is None or not text:
            return None
        match = pattern.search(text)
        return match.group(0).lower() if match else None

    def is_profane(self, text: str) -> bool:
        return self.find_match(text) is not None
