"""
Embeds shown to Discord users.
"""
