"""
Moderation for Relaycord.

- word_filter: banned word matching
- link_classifier: link and media detection
- moderation_gate: the profanity and link spam gates with their actions
"""
