"""Tests for the Discord event cogs."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from relaycord.bot.cogs import events_listener, message_listener
from relaycord.pipeline.message_pipeline import PipelineOutcome


def test_message_listener_setup_registers_cog():
    bot = MagicMock()
    pipeline = MagicMock()

    cog = message_listener.setup(bot, pipeline)

    bot.add_cog.assert_called_once_with(cog)
    assert cog.pipeline is pipeline


@pytest.mark.asyncio
async def test_on_message_delegates_to_pipeline():
    pipeline = MagicMock()
    pipeline.process = AsyncMock(return_value=PipelineOutcome.RELAYED)
    cog = message_listener.MessageListenerCog(MagicMock(), pipeline)
    message = SimpleNamespace(id=1, author="someone")

    assert await cog.on_message(message) is PipelineOutcome.RELAYED
    pipeline.process.assert_awaited_once_with(message)


@pytest.mark.asyncio
async def test_on_ready_advertises_help_command():
    bot = MagicMock()
    bot.user = SimpleNamespace(id=5)
    bot.guilds = [object(), object()]
    bot.change_presence = AsyncMock()
    cog = events_listener.setup(bot, "?")

    await cog.on_ready()

    bot.add_cog.assert_called_once_with(cog)
    activity = bot.change_presence.await_args.kwargs["activity"]
    assert activity.name == "?help"
    assert activity.type == discord.ActivityType.listening


@pytest.mark.asyncio
async def test_on_ready_without_user_skips_presence():
    bot = MagicMock()
    bot.user = None
    bot.change_presence = AsyncMock()
    cog = events_listener.EventsListenerCog(bot)

    await cog.on_ready()

    bot.change_presence.assert_not_awaited()
