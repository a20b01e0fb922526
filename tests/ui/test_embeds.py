"""
Tests for the help and error embed builders.
"""

import unittest

import discord

from relaycord.datatypes.command_datatypes import COMMAND_DEFINITIONS, CommandName
from relaycord.ui import embeds


class TestEmbeds(unittest.TestCase):
    """
    Tests for the embed builders.
    """

    def test_help_embed_lists_every_command(self):
        embed = embeds.build_help_embed("?")

        self.assertEqual(embed.title, "Help - List of Commands")
        for name in CommandName:
            self.assertIn(f"`{name.value}`", embed.description)
        self.assertIn("?help <command>", embed.footer.text)

    def test_command_help_embed(self):
        embed = embeds.build_command_help_embed(CommandName.SETCHANNEL)
        definition = COMMAND_DEFINITIONS[CommandName.SETCHANNEL]

        self.assertEqual(embed.title, "Help - setchannel Command")
        self.assertEqual(embed.description, definition.description)
        self.assertEqual(embed.fields[0].name, "Usage")
        self.assertEqual(embed.fields[0].value, definition.usage)

    def test_not_found_embed(self):
        embed = embeds.build_not_found_embed("dance")

        self.assertEqual(embed.title, "Help - Command Not Found")
        self.assertIn("`dance`", embed.description)
        self.assertEqual(embed.color, embeds.NOT_FOUND_COLOR)

    def test_error_embed(self):
        embed = embeds.build_error_embed("Bot error, please try again!")

        self.assertEqual(embed.description, "**❌ | Bot error, please try again! **")
        self.assertIsInstance(embed.color, discord.Colour)


if __name__ == "__main__":
    unittest.main()
