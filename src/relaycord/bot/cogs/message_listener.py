"""Message listener Cog for Relaycord.

Hands every new message to the message pipeline.
"""

import discord
from discord.ext import commands

from relaycord.pipeline.message_pipeline import MessagePipeline, PipelineOutcome
from relaycord.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for the on_message event."""

    def __init__(self, discord_bot_instance, pipeline: MessagePipeline):
        self.bot = discord_bot_instance
        self.pipeline = pipeline
        logger.info("Message listener cog loaded")

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message) -> PipelineOutcome:
        outcome = await self.pipeline.process(message)
        if outcome not in (PipelineOutcome.IGNORED, PipelineOutcome.DROPPED, PipelineOutcome.PASSED):
            logger.debug("Message %s from %s: %s", message.id, message.author, outcome)
        return outcome


def setup(discord_bot_instance, pipeline: MessagePipeline) -> MessageListenerCog:
    """Register the MessageListenerCog with the bot."""
    cog = MessageListenerCog(discord_bot_instance, pipeline)
    discord_bot_instance.add_cog(cog)
    return cog
