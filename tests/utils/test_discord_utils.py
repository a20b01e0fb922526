from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from fakes import FakeChannel, FakeGuild, make_member
from relaycord.errors import InvalidReference, PlatformActionError
from relaycord.util import discord_utils


def forbidden():
    return discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions")


@pytest.mark.parametrize("author,expected", [
    (SimpleNamespace(bot=True), True),
    (SimpleNamespace(bot=False), False),
    (SimpleNamespace(), False),
])
def test_is_ignored_author(author, expected):
    assert discord_utils.is_ignored_author(author) is expected


@pytest.mark.parametrize("member,expected", [
    (make_member(admin=True), True),
    (make_member(admin=False), False),
    (SimpleNamespace(id=1), False),  # DM user, no guild permissions
])
def test_has_administrator(member, expected):
    assert discord_utils.has_administrator(member) is expected


@pytest.mark.parametrize("reference,expected", [
    ("<#123>", "123"),
    ("123", "123"),
    ("<@456>", "456"),
    ("general", "general"),
])
def test_strip_channel_reference(reference, expected):
    assert discord_utils.strip_channel_reference(reference) == expected


def test_resolve_channel():
    channel = FakeChannel(123)
    guild = FakeGuild(1, [channel])

    assert discord_utils.resolve_channel(guild, "<#123>") is channel

    with pytest.raises(InvalidReference, match="Invalid channel ID: 999"):
        discord_utils.resolve_channel(guild, "999")
    with pytest.raises(InvalidReference):
        discord_utils.resolve_channel(guild, "general")
    for reference in ("\u00b2", "\u0661\u0662", ""):
        with pytest.raises(InvalidReference):
            discord_utils.resolve_channel(guild, reference)


def test_mentions():
    assert discord_utils.mention(make_member(7)) == "<@7>"
    assert discord_utils.mention(SimpleNamespace(id=8, mention=None)) == "<@8>"
    assert discord_utils.channel_mention(9) == "<#9>"


@pytest.mark.asyncio
async def test_timeout_member_passes_deadline_and_reason():
    member = make_member()

    await discord_utils.timeout_member(member, 10, "Inappropriate language")

    until = member.timeout.await_args.args[0]
    remaining = until - discord.utils.utcnow()
    assert 9 * 60 < remaining.total_seconds() <= 10 * 60
    assert member.timeout.await_args.kwargs == {"reason": "Inappropriate language"}


@pytest.mark.asyncio
async def test_actions_wrap_http_errors():
    message = SimpleNamespace(delete=AsyncMock(side_effect=forbidden()), reply=AsyncMock(side_effect=forbidden()))
    member = make_member()
    member.ban = AsyncMock(side_effect=forbidden())

    with pytest.raises(PlatformActionError, match="delete failed"):
        await discord_utils.delete_message(message)
    with pytest.raises(PlatformActionError, match="ban failed"):
        await discord_utils.ban_member(member, "Link spam")
    with pytest.raises(PlatformActionError, match="reply failed"):
        await discord_utils.reply(message, "hi")


@pytest.mark.asyncio
async def test_safe_send_reports_failure_without_raising():
    working = FakeChannel(1)
    broken = FakeChannel(2, fail_with=forbidden())

    assert await discord_utils.safe_send(working, "hello") is True
    assert await discord_utils.safe_send(broken, "hello") is False
    assert working.sent == [("hello", {})]


@pytest.mark.asyncio
async def test_send_text_with_embed():
    channel = FakeChannel(1)
    embed = discord.Embed(description="x")

    await discord_utils.send_text(channel, embed=embed)

    assert channel.sent == [(None, {"embed": embed})]


@pytest.mark.asyncio
async def test_create_text_channel():
    guild = FakeGuild(1)

    channel = await discord_utils.create_text_channel(guild, "ai-chat")

    assert channel.name == "ai-chat"
    guild.create_text_channel.assert_awaited_once_with("ai-chat")


@pytest.mark.parametrize("length,expected_length", [(0, 0), (2000, 2000), (2001, 2000), (5000, 2000)])
def test_truncate_message(length, expected_length):
    text = discord_utils.truncate_message("a" * length)

    assert len(text) == expected_length
    if length > 2000:
        assert text.endswith("...")


@pytest.mark.asyncio
async def test_long_replies_are_truncated():
    message = SimpleNamespace(reply=AsyncMock())
    channel = FakeChannel(1)

    await discord_utils.reply(message, "x" * 2500)
    await discord_utils.send_text(channel, "y" * 2500)

    assert len(message.reply.await_args.args[0]) == discord_utils.MESSAGE_CHAR_LIMIT
    assert len(channel.sent[0][0]) == discord_utils.MESSAGE_CHAR_LIMIT
