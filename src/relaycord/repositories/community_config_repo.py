"""
Repository for the community_config and link_exception_channels tables.

Every write is an upsert: the config row of a guild is created on first
write and never deleted here.
"""

from __future__ import annotations

from typing import Dict, List

from relaycord.database.db_connection import ConnectionManager
from relaycord.datatypes.community_config import CommunityConfig
from relaycord.datatypes.discord_datatypes import ChannelID, GuildID
from relaycord.util.logger import get_logger

logger = get_logger("community_config_repo")


class CommunityConfigRepository:
    """Lookup and upsert access to per-guild configuration."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._db = connection_manager

    async def find_by_community(self, guild_id: GuildID) -> CommunityConfig | None:
        """Fetch one guild's config, or None if the guild was never configured."""
        row = await self._db.fetch_one(
            "SELECT guild_id, channel_id FROM community_config WHERE guild_id = ?",
            (GuildID(guild_id).to_int(),),
        )
        if row is None:
            return None

        config = self._row_to_config(row)
        exception_rows = await self._db.fetch_all(
            "SELECT channel_id FROM link_exception_channels WHERE guild_id = ?",
            (config.guild_id.to_int(),),
        )
        config.link_exception_channels = {ChannelID(r["channel_id"]) for r in exception_rows}
        return config

    async def upsert(self, guild_id: GuildID, *, channel_id: ChannelID | None) -> CommunityConfig | None:
        """Bind ``channel_id`` as the guild's response channel, creating the row if needed."""
        gid = GuildID(guild_id)
        cid = ChannelID(channel_id) if channel_id is not None else None

        await self._db.execute(
            """
            INSERT INTO community_config (guild_id, channel_id) VALUES (?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET channel_id = excluded.channel_id
            """,
            (gid.to_int(), cid.to_int() if cid is not None else None),
        )

        logger.debug("[CONFIG STORE] Guild %s bound to channel %s", gid, cid)
        return await self.find_by_community(gid)

    async def add_to_exception_set(self, guild_id: GuildID, channel_id: ChannelID) -> bool:
        """Add a link exception channel. Returns False if it was already in the set."""
        gid = GuildID(guild_id)
        cid = ChannelID(channel_id)

        async with self._db.transaction() as conn:
            await conn.execute(
                "INSERT OR IGNORE INTO community_config (guild_id) VALUES (?)",
                (gid.to_int(),),
            )
            cursor = await conn.execute(
                "INSERT OR IGNORE INTO link_exception_channels (guild_id, channel_id) VALUES (?, ?)",
                (gid.to_int(), cid.to_int()),
            )
            added = cursor.rowcount > 0
            await cursor.close()

        logger.debug("[CONFIG STORE] Guild %s exception channel %s (new=%s)", gid, cid, added)
        return added

    async def list_all(self) -> List[CommunityConfig]:
        """Fetch every guild config with its exception channels."""
        rows = await self._db.fetch_all("SELECT guild_id, channel_id FROM community_config ORDER BY guild_id")
        exception_rows = await self._db.fetch_all("SELECT guild_id, channel_id FROM link_exception_channels")

        configs: Dict[int, CommunityConfig] = {}
        for row in rows:
            config = self._row_to_config(row)
            configs[config.guild_id.to_int()] = config

        for row in exception_rows:
            config = configs.get(row["guild_id"])
            if config is not None:
                config.link_exception_channels.add(ChannelID(row["channel_id"]))

        return list(configs.values())

    @staticmethod
    def _row_to_config(row) -> CommunityConfig:
        return CommunityConfig(
            guild_id=GuildID(row["guild_id"]),
            channel_id=ChannelID(row["channel_id"]) if row["channel_id"] is not None else None,
        )
