"""
Error taxonomy for Relaycord.

None of these are fatal: each one is caught while handling the single
message that caused it and turned into a reply or a log line.
"""


class RelaycordError(Exception):
    """Base class for every error raised by Relaycord itself."""


class InvalidReference(RelaycordError):
    """A channel reference did not resolve to a channel of the guild."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Invalid channel ID: {reference}")
        self.reference = reference


class PermissionDenied(RelaycordError):
    """The invoking member failed an administrator or owner check."""


class EmptyQuery(RelaycordError):
    """The relay was asked to answer whitespace-only text."""


class UpstreamError(RelaycordError):
    """The chat relay call raised or came back empty."""


class PlatformActionError(RelaycordError):
    """A Discord action (delete, timeout, ban, send, create) failed."""

    def __init__(self, action: str, detail: str) -> None:
        super().__init__(f"{action} failed: {detail}")
        self.action = action
        self.detail = detail
