"""
The shared SQLite connection behind the config and banned word stores.

Relaycord keeps one aiosqlite connection open for the whole run. Each
message touches the config store at most once and the stores only ever
write a single row or two, so the manager offers small query helpers
instead of handing cursors around:

    await db_connection.open(DB_PATH)

    row = await db_connection.fetch_one("SELECT ... WHERE guild_id = ?", (gid,))
    rows = await db_connection.fetch_all("SELECT ...")
    changed = await db_connection.execute("INSERT OR IGNORE ...", (gid, cid))

    async with db_connection.transaction() as conn:
        await conn.execute("INSERT ...")
        await conn.execute("INSERT ...")

    await db_connection.close()

Writes hold ``_write_lock`` so two commands racing on the same guild
commit one after the other.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, List, Sequence

import aiosqlite

from relaycord.util.logger import get_logger

logger = get_logger("database_connection")

DEFAULT_PRAGMAS = (
    "PRAGMA journal_mode = WAL",
    "PRAGMA foreign_keys = ON",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA busy_timeout = 5000",
)

Params = Sequence[Any]


class ConnectionManager:
    """Owns the aiosqlite connection shared by every repository."""

    def __init__(self, pragmas: Sequence[str] = DEFAULT_PRAGMAS) -> None:
        self._pragmas = tuple(pragmas)
        self._conn: aiosqlite.Connection | None = None
        self._path: Path | None = None
        self._write_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def path(self) -> Path | None:
        return self._path

    async def open(self, path: Path) -> None:
        """
        Open ``path`` (creating its directory) and apply the pragmas.

        Reopening the same file is a no-op.

        Raises:
            RuntimeError: If a connection to a different file is already open.
        """
        if self._conn is not None:
            if self._path == path:
                return
            raise RuntimeError(f"Connection already open on {self._path}, cannot open {path}")

        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(path)
        conn.row_factory = aiosqlite.Row
        for pragma in self._pragmas:
            await conn.execute(pragma)
        await conn.commit()

        self._conn = conn
        self._path = path
        logger.info("[DB CONNECTION] Opened %s", path)

    async def close(self) -> None:
        """Checkpoint the WAL into the main file and close. Safe to call twice."""
        conn, self._conn = self._conn, None
        if conn is None:
            return

        try:
            await conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
        except aiosqlite.Error as exc:
            logger.warning("[DB CONNECTION] WAL checkpoint failed: %s", exc)
        finally:
            await conn.close()
            logger.info("[DB CONNECTION] Closed %s", self._path)

    @property
    def connection(self) -> aiosqlite.Connection:
        """
        Raises:
            RuntimeError: If ``open`` has not been awaited yet.
        """
        if self._conn is None:
            raise RuntimeError("Database connection is not open; call open() at startup")
        return self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run several writes atomically. Commits on exit, rolls back if the body raises."""
        conn = self.connection
        async with self._write_lock:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def execute(self, sql: str, params: Params = ()) -> int:
        """Run one write statement in its own transaction and return the affected row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, params)
            changed = cursor.rowcount
            await cursor.close()
        return changed

    async def fetch_one(self, sql: str, params: Params = ()) -> aiosqlite.Row | None:
        async with self.connection.execute(sql, params) as cursor:
            return await cursor.fetchone()

    async def fetch_all(self, sql: str, params: Params = ()) -> List[aiosqlite.Row]:
        async with self.connection.execute(sql, params) as cursor:
            return list(await cursor.fetchall())


db_connection = ConnectionManager()
