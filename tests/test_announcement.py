from unittest.mock import MagicMock

import discord
import pytest

from fakes import FakeChannel, FakeGuild
from relaycord.command.announcement import broadcast_announcement, format_announcement
from relaycord.datatypes.community_config import CommunityConfig
from relaycord.datatypes.discord_datatypes import ChannelID, GuildID


def make_bot(guilds):
    bot = MagicMock()
    bot.get_guild.side_effect = {guild.id: guild for guild in guilds}.get
    return bot


@pytest.mark.asyncio
async def test_failure_in_one_guild_does_not_block_others():
    broken = FakeChannel(11, fail_with=RuntimeError("connection reset"))
    healthy = FakeChannel(22)
    bot = make_bot([FakeGuild(1, [broken]), FakeGuild(2, [healthy])])
    configs = [
        CommunityConfig(guild_id=GuildID(1), channel_id=ChannelID(11)),
        CommunityConfig(guild_id=GuildID(2), channel_id=ChannelID(22)),
    ]

    summary = await broadcast_announcement(bot, configs, "hello")

    assert healthy.sent == [(format_announcement("hello"), {})]
    assert summary.delivered == [GuildID(2)]
    assert [guild_id for guild_id, _ in summary.failed] == [GuildID(1)]
    assert "connection reset" in summary.failed[0][1]
    assert summary.attempted == 2


@pytest.mark.asyncio
async def test_discord_errors_are_recorded_as_failures():
    forbidden = discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Access")
    bot = make_bot([FakeGuild(1, [FakeChannel(11, fail_with=forbidden)])])

    summary = await broadcast_announcement(
        bot, [CommunityConfig(guild_id=GuildID(1), channel_id=ChannelID(11))], "hello"
    )

    assert summary.delivered == []
    assert len(summary.failed) == 1


@pytest.mark.asyncio
async def test_unbound_and_unknown_guilds_are_skipped():
    bot = make_bot([FakeGuild(1, [FakeChannel(11)])])
    configs = [
        CommunityConfig(guild_id=GuildID(1)),
        CommunityConfig(guild_id=GuildID(2), channel_id=ChannelID(22)),
        CommunityConfig(guild_id=GuildID(1), channel_id=ChannelID(99)),
    ]

    summary = await broadcast_announcement(bot, configs, "hello")

    assert summary.skipped == [GuildID(1), GuildID(2), GuildID(1)]
    assert summary.attempted == 0


def test_format_announcement():
    assert format_announcement("hi all") == "📢 **Global Announcement:** hi all"
