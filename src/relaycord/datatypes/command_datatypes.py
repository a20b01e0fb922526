"""
Prefix command definitions.

The command set is closed: every command is a member of :class:`CommandName`
and has exactly one :class:`CommandDefinition` in ``COMMAND_DEFINITIONS``
carrying its help text and the number of arguments it accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from relaycord.datatypes.discord_datatypes import GuildID


class CommandName(Enum):
    """Enumeration of the supported prefix commands."""

    SETCHANNEL = "setchannel"
    ADDBADWORD = "addbadword"
    SETUP = "setup"
    ADDCHANNELEXCEPTION = "addchannelexception"
    HELP = "help"
    SENDGLOBALANNOUNCE = "sendglobalannounce"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def lookup(cls, token: str) -> "CommandName | None":
        """Return the command named by ``token`` or None. Matching is case-sensitive."""
        try:
            return cls(token)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class CommandDefinition:
    """Help text and argument arity of one command.

    ``max_args`` of ``None`` means the command takes free text of any length.
    """

    description: str
    usage: str
    min_args: int = 0
    max_args: int | None = 0

    def accepts(self, arg_count: int) -> bool:
        if arg_count < self.min_args:
            return False
        return self.max_args is None or arg_count <= self.max_args


COMMAND_DEFINITIONS: Dict[CommandName, CommandDefinition] = {
    CommandName.SETCHANNEL: CommandDefinition(
        description="Sets the channel for the bot to respond in.",
        usage="!setchannel <channelid>",
        min_args=1,
        max_args=1,
    ),
    CommandName.ADDBADWORD: CommandDefinition(
        description="Adds a word to the list of banned words.",
        usage="!addbadword <word>",
        min_args=1,
        max_args=1,
    ),
    CommandName.SETUP: CommandDefinition(
        description="Creates an AI Chat channel for the bot to use.",
        usage="!setup",
    ),
    CommandName.ADDCHANNELEXCEPTION: CommandDefinition(
        description="Adds a channel to the list of link exception channels.",
        usage="!addchannelexception <channelid>",
        min_args=1,
        max_args=1,
    ),
    CommandName.HELP: CommandDefinition(
        description="Shows the list of commands or details of a specific command.",
        usage="!help [command]",
        max_args=1,
    ),
    CommandName.SENDGLOBALANNOUNCE: CommandDefinition(
        description="Sends a global announcement to all servers.",
        usage="!sendglobalannounce <message>",
        min_args=1,
        max_args=None,
    ),
}


@dataclass(slots=True)
class ParsedCommand:
    """A prefixed message split into its command token and arguments."""

    token: str
    args: List[str] = field(default_factory=list)

    @property
    def name(self) -> CommandName | None:
        return CommandName.lookup(self.token)


@dataclass(slots=True)
class AnnouncementSummary:
    """Per-guild outcome of a global announcement.

    Attributes:
        delivered: Guilds whose response channel received the announcement.
        failed: Guilds where sending raised, with the error text.
        skipped: Guilds without a bound channel, or that the bot can no longer see.
    """

    delivered: List[GuildID] = field(default_factory=list)
    failed: List[Tuple[GuildID, str]] = field(default_factory=list)
    skipped: List[GuildID] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)
