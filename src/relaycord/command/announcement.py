"""Global announcement fan-out.

Sends one message to the response channel of every configured guild.
Each send is independent: a failure is recorded in the returned
:class:`AnnouncementSummary` and never stops the other guilds.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

import discord

from relaycord.datatypes.command_datatypes import AnnouncementSummary
from relaycord.datatypes.community_config import CommunityConfig
from relaycord.util import discord_utils
from relaycord.util.logger import get_logger

logger = get_logger("announcement")

ANNOUNCEMENT_TEMPLATE = "📢 **Global Announcement:** {text}"


def format_announcement(text: str) -> str:
    return ANNOUNCEMENT_TEMPLATE.format(text=text)


async def broadcast_announcement(
    bot: discord.Bot,
    configs: Iterable[CommunityConfig],
    text: str,
) -> AnnouncementSummary:
    """Send ``text`` to every bound response channel the bot can still see."""
    summary = AnnouncementSummary()
    content = format_announcement(text)
    targets = []

    for config in configs:
        if config.channel_id is None:
            summary.skipped.append(config.guild_id)
            continue
        guild = bot.get_guild(config.guild_id.to_int())
        channel = guild.get_channel(config.channel_id.to_int()) if guild is not None else None
        if channel is None:
            logger.debug("[ANNOUNCE] Guild %s or its channel is unavailable, skipping", config.guild_id)
            summary.skipped.append(config.guild_id)
            continue
        targets.append((config, channel))

    async def deliver(config: CommunityConfig, channel) -> None:
        try:
            await discord_utils.send_text(channel, content)
        except Exception as exc:
            logger.warning("[ANNOUNCE] Delivery to guild %s failed: %s", config.guild_id, exc)
            summary.failed.append((config.guild_id, str(exc)))
        else:
            summary.delivered.append(config.guild_id)

    await asyncio.gather(*(deliver(config, channel) for config, channel in targets))

    logger.info(
        "[ANNOUNCE] Delivered to %d guild(s), %d failed, %d skipped",
        len(summary.delivered),
        len(summary.failed),
        len(summary.skipped),
    )
    return summary
