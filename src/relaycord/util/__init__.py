"""
Utility functions and helpers for Relaycord.

- logger: console and file logging
- discord_utils: wrappers around Discord actions
"""
