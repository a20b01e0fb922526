"""Per-message decision pipeline.

Every inbound message goes through these steps, stopping at the first
one that handles it:

1. Bot authors are ignored.
2. Direct messages go straight to the chat relay.
3. In a configured guild, messages outside the bound response channel
   are dropped unless they start with the command prefix. A config with
   no bound channel yet drops every unprefixed message.
4. Profanity gate, then link spam gate.
5. Prefixed messages go to the command router; unknown commands are
   dropped and never reach the relay.
6. Plain messages in the bound response channel are relayed.
"""

from __future__ import annotations

from enum import Enum

import discord

from relaycord.command.command_router import CommandRouter
from relaycord.datatypes.discord_datatypes import GuildID
from relaycord.errors import EmptyQuery, PlatformActionError, UpstreamError
from relaycord.moderation.moderation_gate import ModerationGate
from relaycord.relay.chat_relay import ChatRelay
from relaycord.repositories.community_config_repo import CommunityConfigRepository
from relaycord.ui import embeds
from relaycord.util import discord_utils
from relaycord.util.logger import get_logger

logger = get_logger("message_pipeline")

RELAY_ERROR_MESSAGE = "Bot error, please try again!"


class PipelineOutcome(Enum):
    """What the pipeline did with a message."""

    IGNORED = "ignored"
    DROPPED = "dropped"
    TIMED_OUT = "timed_out"
    BANNED = "banned"
    COMMAND = "command"
    RELAYED = "relayed"
    RELAY_FAILED = "relay_failed"
    PASSED = "passed"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


class MessagePipeline:
    """Applies the moderation gates, command router and chat relay to one message."""

    def __init__(
        self,
        config_store: CommunityConfigRepository,
        gate: ModerationGate,
        router: CommandRouter,
        relay: ChatRelay,
    ) -> None:
        self.config_store = config_store
        self.gate = gate
        self.router = router
        self.relay = relay

    async def process(self, message: discord.Message) -> PipelineOutcome:
        """Handle one message. Never raises; unexpected errors are logged."""
        try:
            return await self._process(message)
        except Exception as exc:
            logger.error("[PIPELINE] Unhandled error processing message %s: %s", getattr(message, "id", "?"), exc, exc_info=True)
            return PipelineOutcome.FAILED

    async def _process(self, message: discord.Message) -> PipelineOutcome:
        if discord_utils.is_ignored_author(message.author):
            return PipelineOutcome.IGNORED

        if message.guild is None:
            return await self._relay_direct_message(message)

        text = message.content or ""
        if not text.strip():
            return PipelineOutcome.IGNORED

        config = await self.config_store.find_by_community(GuildID(message.guild.id))
        is_command = self.router.is_command(text)
        in_response_channel = config is not None and config.is_response_channel(message.channel.id)

        if config is not None and not in_response_channel and not is_command:
            return PipelineOutcome.DROPPED

        if self.gate.is_profane(text):
            await self.gate.enforce_profanity(message)
            return PipelineOutcome.TIMED_OUT

        if self.gate.is_link_spam(message, config):
            await self.gate.enforce_link_spam(message)
            return PipelineOutcome.BANNED

        if is_command:
            if await self.router.dispatch(message):
                return PipelineOutcome.COMMAND
            return PipelineOutcome.DROPPED

        if in_response_channel:
            return await self._relay_guild_message(message)

        return PipelineOutcome.PASSED

    async def _relay_direct_message(self, message: discord.Message) -> PipelineOutcome:
        query = (message.content or "").strip()
        if not query:
            return PipelineOutcome.IGNORED

        try:
            response = await self.relay.respond(query)
        except (UpstreamError, EmptyQuery) as exc:
            logger.error("[PIPELINE] Relay failed for direct message from %s: %s", message.author.id, exc)
            await discord_utils.safe_send(message.author, RELAY_ERROR_MESSAGE)
            return PipelineOutcome.RELAY_FAILED

        return await self._deliver_reply(message, response)

    async def _relay_guild_message(self, message: discord.Message) -> PipelineOutcome:
        query = (message.content or "").strip()

        try:
            response = await self.relay.respond(query)
        except (UpstreamError, EmptyQuery) as exc:
            logger.error("[PIPELINE] Relay failed in channel %s: %s", message.channel.id, exc)
            await discord_utils.safe_send(message.channel, embed=embeds.build_error_embed(RELAY_ERROR_MESSAGE))
            return PipelineOutcome.RELAY_FAILED

        return await self._deliver_reply(message, response)

    @staticmethod
    async def _deliver_reply(message: discord.Message, response: str) -> PipelineOutcome:
        try:
            await discord_utils.reply(message, response)
        except PlatformActionError as exc:
            logger.error("[PIPELINE] Could not deliver relay reply: %s", exc)
            return PipelineOutcome.RELAY_FAILED
        return PipelineOutcome.RELAYED
