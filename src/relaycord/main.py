"""
Relaycord
=========

A Discord bot that keeps a community clean and chats in it: it times out
members who swear, bans link spammers, answers prefix commands, and relays
messages in a dedicated channel (or in DMs) to an AI chat endpoint.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. RELAYCORD_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("RELAYCORD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from relaycord.bot.cogs import events_listener, message_listener
from relaycord.command.command_router import CommandRouter
from relaycord.configuration.app_configuration import AppConfig, app_config
from relaycord.database.database import Database, database
from relaycord.datatypes.discord_datatypes import UserID
from relaycord.moderation.link_classifier import MediaPolicy
from relaycord.moderation.moderation_gate import ModerationGate
from relaycord.moderation.word_filter import WordFilter
from relaycord.pipeline.message_pipeline import MessagePipeline
from relaycord.relay.chat_relay import ChatRelay
from relaycord.repositories.banned_word_repo import BannedWordRepository
from relaycord.repositories.community_config_repo import CommunityConfigRepository
from relaycord.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def load_owner_id() -> UserID | None:
    """Return the owner identity from ``BOT_OWNER_ID``, or None if unset or malformed."""
    raw = os.getenv("BOT_OWNER_ID", "").strip()
    if not raw:
        logger.warning("'BOT_OWNER_ID' not set; global announcements are disabled.")
        return None
    try:
        return UserID(raw)
    except ValueError:
        logger.error("'BOT_OWNER_ID' is not a valid user ID: %r", raw)
        return None


def build_intents() -> discord.Intents:
    """Intents for guild messages, their content, and direct messages."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.guild_messages = True
    intents.dm_messages = True
    return intents


def build_pipeline(
    bot: discord.Bot,
    db: Database,
    word_filter: WordFilter,
    config: AppConfig,
    owner_id: UserID | None,
) -> MessagePipeline:
    """Wire the repositories, gates, router and relay into one pipeline."""
    config_store = CommunityConfigRepository(db.connection_manager)
    gate = ModerationGate(
        word_filter,
        MediaPolicy.from_lists(config.media_extensions, config.media_domains),
        timeout_minutes=config.timeout_minutes,
        timeout_reason=config.timeout_reason,
        ban_reason=config.ban_reason,
    )
    router = CommandRouter(
        bot,
        config_store,
        word_filter,
        prefix=config.command_prefix,
        owner_id=owner_id,
        setup_channel_name=config.setup_channel_name,
    )
    relay = ChatRelay(config.relay_settings)
    return MessagePipeline(config_store, gate, router, relay)


def create_bot(pipeline_factory, prefix: str) -> discord.Bot:
    """Instantiate the Discord bot and register the cogs."""
    bot = discord.Bot(intents=build_intents())
    pipeline = pipeline_factory(bot)
    events_listener.setup(bot, prefix)
    message_listener.setup(bot, pipeline)
    logger.info("All cogs loaded successfully.")
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None, db: Database) -> None:
    """Close the Discord connection, then the database."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord bot: %s", exc)

    try:
        await db.shutdown()
    except Exception as exc:
        logger.exception("Error during database shutdown: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap the database, word filter and bot, returning an exit code."""
    token = load_environment()
    owner_id = load_owner_id()

    logger.info("Initializing database...")
    if not await database.initialize():
        logger.critical("Failed to initialize database.")
        return 1

    word_filter = WordFilter(BannedWordRepository(database.connection_manager), app_config.base_words)
    try:
        await word_filter.load_from_store()
    except Exception as exc:
        logger.critical("Failed to load banned words: %s", exc)
        await database.shutdown()
        return 1

    try:
        bot = create_bot(
            lambda discord_bot: build_pipeline(discord_bot, database, word_filter, app_config, owner_id),
            app_config.command_prefix,
        )
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        await database.shutdown()
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, database)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Relaycord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
