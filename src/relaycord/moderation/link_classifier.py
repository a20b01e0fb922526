"""
Heuristic link detection for the link spam gate.

These are plain substring checks, not a URL parser. They over-match on
purpose: any text containing "http" or "www" counts as a link, and any
text ending in a media extension or naming a media host counts as an
allowed media link, even if "gif" only shows up as part of a word.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Iterable, Tuple

from relaycord.configuration.app_configuration import DEFAULT_MEDIA_DOMAINS, DEFAULT_MEDIA_EXTENSIONS

LINK_MARKERS: Tuple[str, ...] = ("http", "www")


def contains_link(text: str) -> bool:
    """Return True if ``text`` contains an http(s) URL-like substring or "www"."""
    lowered = (text or "").lower()
    return any(marker in lowered for marker in LINK_MARKERS)


@dataclass(frozen=True)
class MediaPolicy:
    """Media extensions and hosts whose links are never treated as spam."""

    extensions: Tuple[str, ...] = tuple(DEFAULT_MEDIA_EXTENSIONS)
    domains: Tuple[str, ...] = tuple(DEFAULT_MEDIA_DOMAINS)
    _extension_pattern: re.Pattern | None = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        extensions = [ext.lower().lstrip(".") for ext in self.extensions if ext.strip(". ")]
        pattern = None
        if extensions:
            pattern = re.compile(rf"\.(?:{'|'.join(re.escape(ext) for ext in extensions)})$", re.IGNORECASE)
        object.__setattr__(self, "_extension_pattern", pattern)

    @classmethod
    def from_lists(cls, extensions: Iterable[str], domains: Iterable[str]) -> "MediaPolicy":
        return cls(tuple(extensions), tuple(d.lower() for d in domains))

    def is_allowed_media(self, url: str) -> bool:
        """Return True if ``url`` ends in a media extension or mentions a media host."""
        text = (url or "").strip()
        if self._extension_pattern is not None and self._extension_pattern.search(text):
            return True
        lowered = text.lower()
        return any(domain in lowered for domain in self.domains)


default_media_policy = MediaPolicy()


def is_allowed_media(url: str, policy: MediaPolicy = default_media_policy) -> bool:
    return policy.is_allowed_media(url)
