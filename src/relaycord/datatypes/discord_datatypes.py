"""
Type-safe wrapper classes for Discord identifiers.

Discord snowflakes are 64-bit integers that are often carried around as
strings (mentions, command arguments, database rows). These wrappers give
one consistent way to compare, hash and convert them.
"""

from __future__ import annotations

from typing import Union


class Snowflake:
    """
    Base wrapper for a Discord snowflake ID.

    The value is stored as a normalised decimal string so ``"0123"`` and
    ``123`` compare equal. Instances compare equal to plain ints and strings
    holding the same number, but never to a wrapper of a different kind.

    Example:
        >>> cid = ChannelID("123456789012345678")
        >>> cid.to_int()
        123456789012345678
        >>> cid == 123456789012345678
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        """
        Args:
            value: The snowflake as a string, int, or wrapper of the same kind.

        Raises:
            ValueError: If the value cannot be converted to a snowflake.
        """
        if isinstance(value, Snowflake):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool")
        elif isinstance(value, int):
            self._value = str(value)
        elif isinstance(value, str):
            self._value = str(int(value.strip()))
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, str):
            return self._value == other.strip()
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))


class UserID(Snowflake):
    """Snowflake of a Discord user or member."""

    __slots__ = ()

    @classmethod
    def from_user(cls, user) -> "UserID":
        return cls(user.id)


class GuildID(Snowflake):
    """Snowflake of a Discord guild (a community)."""

    __slots__ = ()

    @classmethod
    def from_guild(cls, guild) -> "GuildID":
        return cls(guild.id)


class ChannelID(Snowflake):
    """Snowflake of a Discord channel."""

    __slots__ = ()

    @classmethod
    def from_channel(cls, channel) -> "ChannelID":
        return cls(channel.id)
