"""
Relaycord - Discord community moderation and chat relay bot

Relaycord watches every message in the guilds it joins. Swearing earns a
timeout, link spam earns a ban, prefix commands configure the bot, and
messages in a bound channel (or in DMs) are answered by an AI chat
endpoint.
"""

__version__ = "0.1.0"
