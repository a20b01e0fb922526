"""
Database package for Relaycord.

One shared aiosqlite connection, schema creation, and lifecycle handling.
"""
