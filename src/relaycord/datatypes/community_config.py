"""
Per-guild configuration persisted by the bot.

Database schema:
- community_config table with columns: guild_id, channel_id
- link_exception_channels table with columns: guild_id, channel_id
"""
from dataclasses import dataclass, field
from typing import Set

from relaycord.datatypes.discord_datatypes import ChannelID, GuildID


@dataclass(slots=True)
class CommunityConfig:
    """Configuration of one guild.

    ``channel_id`` is the response channel bound for the chat relay and is
    ``None`` until ``!setchannel`` or ``!setup`` runs. ``link_exception_channels``
    lists the channels where members may post arbitrary links.
    """

    guild_id: GuildID
    channel_id: ChannelID | None = None
    link_exception_channels: Set[ChannelID] = field(default_factory=set)

    def is_response_channel(self, channel_id) -> bool:
        return self.channel_id is not None and self.channel_id == ChannelID(channel_id)

    def is_exception_channel(self, channel_id) -> bool:
        return ChannelID(channel_id) in self.link_exception_channels
