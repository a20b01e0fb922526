"""
Prefix command parsing and dispatch.

``parse_command`` splits ``!name arg1 arg2`` on whitespace (no quoting).
``CommandRouter.dispatch`` checks the token against the closed
:class:`CommandName` set and the argument count against the command's
:class:`CommandDefinition`, then runs the handler registered for it.
Unknown commands are ignored without a reply.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, List

import discord

from relaycord.command.announcement import broadcast_announcement
from relaycord.datatypes.command_datatypes import (
    COMMAND_DEFINITIONS,
    CommandName,
    ParsedCommand,
)
from relaycord.datatypes.discord_datatypes import ChannelID, GuildID, UserID
from relaycord.errors import InvalidReference, PermissionDenied, PlatformActionError
from relaycord.moderation.word_filter import WordFilter
from relaycord.repositories.community_config_repo import CommunityConfigRepository
from relaycord.ui import embeds
from relaycord.util import discord_utils
from relaycord.util.logger import get_logger

logger = get_logger("command_router")

CommandHandler = Callable[[discord.Message, List[str]], Awaitable[None]]

ADMIN_REQUIRED_MESSAGE = "You need Administrator permissions to use this command."
OWNER_REQUIRED_MESSAGE = "You do not have permission to use this command."
GENERIC_ERROR_MESSAGE = "Something went wrong while running this command."


def parse_command(text: str, prefix: str = "!") -> ParsedCommand | None:
    """Split a prefixed message into its command token and arguments.

    Returns None when ``text`` does not start with ``prefix`` or carries no token.
    """
    if not text or not text.startswith(prefix):
        return None
    parts = text[len(prefix):].split()
    if not parts:
        return None
    return ParsedCommand(token=parts[0], args=parts[1:])


class CommandRouter:
    """Dispatches prefix commands to their handlers.

    Parameters
    ----------
    bot:
        Bot used to look up guilds for the global announcement.
    config_store:
        Repository holding per-guild configuration.
    word_filter:
        Live banned word filter updated by ``addbadword``.
    prefix:
        Command prefix.
    owner_id:
        The only user allowed to run ``sendglobalannounce``; None disables it.
    setup_channel_name:
        Name of the channel created by ``setup``.
    """

    def __init__(
        self,
        bot: discord.Bot,
        config_store: CommunityConfigRepository,
        word_filter: WordFilter,
        *,
        prefix: str = "!",
        owner_id: UserID | None = None,
        setup_channel_name: str = "ai-chat",
    ) -> None:
        self.bot = bot
        self.config_store = config_store
        self.word_filter = word_filter
        self.prefix = prefix
        self.owner_id = UserID(owner_id) if owner_id is not None else None
        self.setup_channel_name = setup_channel_name

        self._handlers: Dict[CommandName, CommandHandler] = {
            CommandName.SETCHANNEL: self.handle_setchannel,
            CommandName.ADDBADWORD: self.handle_addbadword,
            CommandName.SETUP: self.handle_setup,
            CommandName.ADDCHANNELEXCEPTION: self.handle_addchannelexception,
            CommandName.HELP: self.handle_help,
            CommandName.SENDGLOBALANNOUNCE: self.handle_sendglobalannounce,
        }
        missing = set(CommandName) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler registered for: {', '.join(sorted(m.value for m in missing))}")

    def is_command(self, text: str) -> bool:
        return bool(text) and text.startswith(self.prefix)

    async def dispatch(self, message: discord.Message) -> bool:
        """Run the command in ``message`` if it names one.

        Returns:
            True if a known command was handled (including a usage or error
            reply), False if the message is not a known command.
        """
        parsed = parse_command(message.content, self.prefix)
        if parsed is None:
            return False

        name = parsed.name
        if name is None:
            logger.debug("[COMMANDS] Ignoring unknown command %r", parsed.token)
            return False

        definition = COMMAND_DEFINITIONS[name]
        if not definition.accepts(len(parsed.args)):
            await discord_utils.safe_send(message.channel, f"Usage: `{definition.usage}`")
            return True

        logger.info(
            "[COMMANDS] %s invoked by %s in guild %s",
            name.value,
            message.author.id,
            message.guild.id if message.guild else None,
        )
        try:
            await self._handlers[name](message, parsed.args)
        except (InvalidReference, PermissionDenied) as exc:
            await discord_utils.safe_send(message.channel, str(exc))
        except PlatformActionError as exc:
            logger.error("[COMMANDS] %s failed on a Discord action: %s", name.value, exc)
        except Exception as exc:
            logger.error("[COMMANDS] %s failed: %s", name.value, exc, exc_info=True)
            await discord_utils.safe_send(message.channel, GENERIC_ERROR_MESSAGE)
        return True

    # ========== Handlers ==========

    async def handle_setchannel(self, message: discord.Message, args: List[str]) -> None:
        channel = discord_utils.resolve_channel(message.guild, args[0])
        await self.config_store.upsert(GuildID(message.guild.id), channel_id=ChannelID(channel.id))
        await discord_utils.send_text(message.channel, f"Bot channel set to {discord_utils.channel_mention(channel.id)}")

    async def handle_addbadword(self, message: discord.Message, args: List[str]) -> None:
        word = await self.word_filter.persist_word(args[0].lower())
        await discord_utils.send_text(message.channel, f"Added new bad word: {word}")

    async def handle_setup(self, message: discord.Message, args: List[str]) -> None:
        if not discord_utils.has_administrator(message.author):
            raise PermissionDenied(ADMIN_REQUIRED_MESSAGE)

        try:
            channel = await discord_utils.create_text_channel(message.guild, self.setup_channel_name)
            await self.config_store.upsert(GuildID(message.guild.id), channel_id=ChannelID(channel.id))
        except Exception as exc:
            logger.error("[COMMANDS] Error creating AI Chat channel: %s", exc)
            await discord_utils.send_text(message.channel, "Failed to create AI Chat channel.")
            return

        await discord_utils.send_text(message.channel, f"AI Chat channel created: {discord_utils.channel_mention(channel.id)}")

    async def handle_addchannelexception(self, message: discord.Message, args: List[str]) -> None:
        channel = discord_utils.resolve_channel(message.guild, args[0])
        await self.config_store.add_to_exception_set(GuildID(message.guild.id), ChannelID(channel.id))
        await discord_utils.send_text(
            message.channel,
            f"Channel {discord_utils.channel_mention(channel.id)} is now a link exception channel.",
        )

    async def handle_help(self, message: discord.Message, args: List[str]) -> None:
        if not args:
            embed = embeds.build_help_embed(self.prefix)
        else:
            name = CommandName.lookup(args[0])
            if name is None:
                embed = embeds.build_not_found_embed(args[0], self.prefix)
            else:
                embed = embeds.build_command_help_embed(name)
        await discord_utils.send_text(message.channel, embed=embed)

    async def handle_sendglobalannounce(self, message: discord.Message, args: List[str]) -> None:
        if self.owner_id is None or self.owner_id != UserID(message.author.id):
            raise PermissionDenied(OWNER_REQUIRED_MESSAGE)

        configs = await self.config_store.list_all()
        summary = await broadcast_announcement(self.bot, configs, " ".join(args))
        await discord_utils.send_text(
            message.channel,
            f"Global announcement sent to {len(summary.delivered)} of {summary.attempted} servers.",
        )
