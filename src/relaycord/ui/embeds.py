"""
Embed builders for help output and error notices.
"""

from typing import Mapping

import discord

from relaycord.datatypes.command_datatypes import COMMAND_DEFINITIONS, CommandDefinition, CommandName

HELP_COLOR = discord.Color.from_rgb(0x00, 0xFF, 0x00)
NOT_FOUND_COLOR = discord.Color.from_rgb(0xFF, 0x00, 0x00)
ERROR_COLOR = discord.Color.from_rgb(0xFF, 0x76, 0x76)

HELP_FOOTER = "Use {prefix}help <command> for more details on a specific command."


def command_list(definitions: Mapping[CommandName, CommandDefinition] = COMMAND_DEFINITIONS) -> str:
    """One line per command: ``name``: description."""
    return "\n".join(f"`{name.value}`: {definition.description}" for name, definition in definitions.items())


def build_help_embed(prefix: str = "!") -> discord.Embed:
    embed = discord.Embed(
        title="Help - List of Commands",
        description=command_list(),
        color=HELP_COLOR,
    )
    embed.set_footer(text=HELP_FOOTER.format(prefix=prefix))
    return embed


def build_command_help_embed(name: CommandName) -> discord.Embed:
    definition = COMMAND_DEFINITIONS[name]
    embed = discord.Embed(
        title=f"Help - {name.value} Command",
        description=definition.description,
        color=HELP_COLOR,
    )
    embed.add_field(name="Usage", value=definition.usage)
    return embed


def build_not_found_embed(token: str, prefix: str = "!") -> discord.Embed:
    embed = discord.Embed(
        title="Help - Command Not Found",
        description=f"Command `{token}` not found.\n\nAvailable commands:\n{command_list()}",
        color=NOT_FOUND_COLOR,
    )
    embed.set_footer(text=HELP_FOOTER.format(prefix=prefix))
    return embed


def build_error_embed(text: str) -> discord.Embed:
    """Red notice used when the bot cannot answer, e.g. a failed relay call."""
    return discord.Embed(description=f"**❌ | {text} **", color=ERROR_COLOR)
