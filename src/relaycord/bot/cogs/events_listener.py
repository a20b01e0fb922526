"""Event listener Cog for Relaycord.

Handles the on_ready lifecycle event.
"""

import discord
from discord.ext import commands

from relaycord.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle handlers."""

    def __init__(self, discord_bot_instance, prefix: str = "!"):
        self.bot = discord_bot_instance
        self.prefix = prefix
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Log the connection and advertise the help command in the presence."""
        if not self.bot.user:
            logger.warning("Bot partially connected, but user information not yet available.")
            return

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(
                type=discord.ActivityType.listening,
                name=f"{self.prefix}help",
            ),
        )
        logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id}) in {len(self.bot.guilds)} guild(s)")


def setup(discord_bot_instance, prefix: str = "!") -> EventsListenerCog:
    """Register the EventsListenerCog with the bot."""
    cog = EventsListenerCog(discord_bot_instance, prefix)
    discord_bot_instance.add_cog(cog)
    return cog
