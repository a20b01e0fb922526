"""
Moderation gates applied to guild messages before any other handling.

Two gates, checked in this order by the pipeline:

1. Profanity: delete the message, time the author out, post a notice.
2. Link spam: a link that is not allowed media, posted by a
   non-administrator outside a link exception channel, gets the message
   deleted, the author banned and a notice posted.

Each Discord action is attempted on its own. A failed delete does not
stop the timeout or ban, and the notice is sent either way.
"""

from __future__ import annotations

import discord

from relaycord.datatypes.community_config import CommunityConfig
from relaycord.errors import PlatformActionError
from relaycord.moderation import link_classifier
from relaycord.moderation.link_classifier import MediaPolicy
from relaycord.moderation.word_filter import WordFilter
from relaycord.util import discord_utils
from relaycord.util.logger import get_logger

logger = get_logger("moderation_gate")

TIMEOUT_NOTICE = "{mention} has been timed out for using inappropriate language."
BAN_NOTICE = "{mention} has been banned for link spamming."


class ModerationGate:
    """Profanity and link spam checks with their enforcement actions."""

    def __init__(
        self,
        word_filter: WordFilter,
        media_policy: MediaPolicy = link_classifier.default_media_policy,
        *,
        timeout_minutes: int = 10,
        timeout_reason: str = "Inappropriate language",
        ban_reason: str = "Link spam",
    ) -> None:
        self.word_filter = word_filter
        self.media_policy = media_policy
        self.timeout_minutes = timeout_minutes
        self.timeout_reason = timeout_reason
        self.ban_reason = ban_reason

    # ---------- predicates ----------

    def is_profane(self, text: str) -> bool:
        return self.word_filter.is_profane(text)

    def is_link_spam(self, message: discord.Message, config: CommunityConfig | None) -> bool:
        """True if the message carries a link none of the exemptions cover."""
        text = message.content or ""
        if not link_classifier.contains_link(text):
            return False
        if self.media_policy.is_allowed_media(text):
            return False
        if discord_utils.has_administrator(message.author):
            return False
        if config is not None and config.is_exception_channel(message.channel.id):
            return False
        return True

    # ---------- enforcement ----------

    async def enforce_profanity(self, message: discord.Message) -> None:
        author = message.author
        logger.info(
            "[MODERATION] Profanity from %s in guild %s (matched %r)",
            author.id,
            message.guild.id,
            self.word_filter.find_match(message.content or ""),
        )
        await self._attempt("delete", discord_utils.delete_message(message))
        await self._attempt("timeout", discord_utils.timeout_member(author, self.timeout_minutes, self.timeout_reason))
        await discord_utils.safe_send(message.channel, TIMEOUT_NOTICE.format(mention=discord_utils.mention(author)))

    async def enforce_link_spam(self, message: discord.Message) -> None:
        author = message.author
        logger.info("[MODERATION] Link spam from %s in guild %s", author.id, message.guild.id)
        await self._attempt("delete", discord_utils.delete_message(message))
        await self._attempt("ban", discord_utils.ban_member(author, self.ban_reason))
        await discord_utils.safe_send(message.channel, BAN_NOTICE.format(mention=discord_utils.mention(author)))

    @staticmethod
    async def _attempt(label: str, action) -> bool:
        try:
            await action
            return True
        except PlatformActionError as exc:
            logger.error("[MODERATION] Error applying %s: %s", label, exc)
            return False
