"""
Discord cogs for Relaycord.

Cogs are thin: they forward Discord events to the message pipeline.
"""
