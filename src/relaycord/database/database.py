"""
Database initialization and lifecycle for SQLite.

The Database class opens the shared connection, creates the schema and
closes everything again at shutdown. Queries live in the repositories
under ``relaycord.repositories``.
"""

from __future__ import annotations

from pathlib import Path

from relaycord.database.db_connection import ConnectionManager, db_connection
from relaycord.database.db_schema import SchemaManager
from relaycord.util.logger import get_logger

logger = get_logger("database")

DB_PATH = Path("./data/relaycord.db").resolve()


class Database:
    """
    Central database coordinator.

    Lifecycle:
        1. Call initialize() at program startup
        2. Hand ``connection_manager`` to the repositories
        3. Call shutdown() at program end
    """

    def __init__(self, db_path: Path = DB_PATH, connection_manager: ConnectionManager = db_connection):
        self.db_path = db_path
        self.connection_manager = connection_manager
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> bool:
        """
        Open the connection and create the schema.

        Returns:
            True if initialization succeeded, False otherwise
        """
        if self._initialized:
            logger.debug("[DATABASE] Already initialized, skipping")
            return True

        try:
            await self.connection_manager.open(self.db_path)
            await SchemaManager.initialize_schema(self.connection_manager.connection)
        except Exception as e:
            logger.error("[DATABASE] Database initialization failed: %s", e)
            await self.connection_manager.close()
            return False

        self._initialized = True
        logger.info("[DATABASE] Database initialized at %s", self.db_path)
        return True

    async def shutdown(self) -> None:
        """Close the shared connection if it was opened."""
        if not self._initialized:
            return

        await self.connection_manager.close()
        self._initialized = False
        logger.info("[DATABASE] Database shutdown complete")


# Global Database instance
database = Database()
