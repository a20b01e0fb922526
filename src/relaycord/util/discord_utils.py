"""
discord_utils.py
================

Low-level Discord helpers for Relaycord.

Stateless wrappers around the Discord actions the pipeline performs:
deleting messages, timing out and banning members, sending text and
creating channels. Every action converts ``discord.HTTPException`` into
:class:`~relaycord.errors.PlatformActionError` so callers can log and
carry on with the next step.
"""

import datetime
from typing import Any

import discord

from relaycord.errors import InvalidReference, PlatformActionError
from relaycord.util.logger import get_logger

logger = get_logger("discord_utils")

# Characters Discord wraps around channel and user mentions
MENTION_CHARACTERS = "<@#>"

# Longest message body Discord accepts
MESSAGE_CHAR_LIMIT = 2000
TRUNCATION_SUFFIX = "..."


def is_ignored_author(author: Any) -> bool:
    """Return True for bot accounts, whose messages are never processed."""
    return bool(getattr(author, "bot", False))


def has_administrator(member: Any) -> bool:
    """
    Check whether a guild member holds the Administrator permission.

    Plain users (direct messages) have no guild permissions and are never
    administrators.
    """
    perms = getattr(member, "guild_permissions", None)
    return bool(getattr(perms, "administrator", False))


def mention(user: Any) -> str:
    return getattr(user, "mention", None) or f"<@{user.id}>"


def channel_mention(channel_id: Any) -> str:
    return f"<#{channel_id}>"


def strip_channel_reference(reference: str) -> str:
    """Turn ``<#123>`` (or a raw id) into the bare id string."""
    return "".join(ch for ch in reference if ch not in MENTION_CHARACTERS)


def truncate_message(content: str, limit: int = MESSAGE_CHAR_LIMIT) -> str:
    """Cut ``content`` to at most ``limit`` characters, marking the cut with an ellipsis."""
    if len(content) <= limit:
        return content
    return content[: limit - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def resolve_channel(guild: discord.Guild, reference: str):
    """
    Resolve a channel id or mention to a channel of ``guild``.

    Raises:
        InvalidReference: If the reference is not numeric or names no channel of the guild.
    """
    channel_id = strip_channel_reference(reference)
    if not (channel_id.isascii() and channel_id.isdecimal()):
        raise InvalidReference(channel_id)
    channel = guild.get_channel(int(channel_id))
    if channel is None:
        raise InvalidReference(channel_id)
    return channel


async def delete_message(message: discord.Message) -> None:
    try:
        await message.delete()
    except discord.HTTPException as exc:
        raise PlatformActionError("delete", str(exc)) from exc


async def timeout_member(member: discord.Member, minutes: int, reason: str) -> None:
    """Time out ``member`` for ``minutes`` minutes."""
    until = discord.utils.utcnow() + datetime.timedelta(minutes=minutes)
    try:
        await member.timeout(until, reason=reason)
    except discord.HTTPException as exc:
        raise PlatformActionError("timeout", str(exc)) from exc


async def ban_member(member: discord.Member, reason: str) -> None:
    try:
        await member.ban(reason=reason)
    except discord.HTTPException as exc:
        raise PlatformActionError("ban", str(exc)) from exc


async def send_text(channel: discord.abc.Messageable, content: str | None = None, *, embed: discord.Embed | None = None):
    """Send ``content`` and/or ``embed`` to ``channel`` and return the sent message."""
    try:
        if embed is not None:
            return await channel.send(content and truncate_message(content), embed=embed)
        return await channel.send(content and truncate_message(content))
    except discord.HTTPException as exc:
        raise PlatformActionError("send", str(exc)) from exc


async def reply(message: discord.Message, content: str):
    try:
        return await message.reply(truncate_message(content))
    except discord.HTTPException as exc:
        raise PlatformActionError("reply", str(exc)) from exc


async def create_text_channel(guild: discord.Guild, name: str):
    """Create a text channel called ``name`` in ``guild`` and return it."""
    try:
        return await guild.create_text_channel(name)
    except discord.HTTPException as exc:
        raise PlatformActionError("create channel", str(exc)) from exc


async def safe_send(channel: discord.abc.Messageable, content: str | None = None, *, embed: discord.Embed | None = None) -> bool:
    """Send like :func:`send_text` but log a failure instead of raising."""
    try:
        await send_text(channel, content, embed=embed)
        return True
    except PlatformActionError as exc:
        logger.error("Failed to send message to channel %s: %s", getattr(channel, "id", "?"), exc)
        return False
