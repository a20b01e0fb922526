import os
from typing import Any, Dict

DEFAULT_SYSTEM_PROMPT = (
    "You are a friendly member of a Discord community. "
    "Answer casually and briefly, in the language of the message."
)


class RelaySettings:
    """Helper exposing typed accessors for the chat relay configuration.

    Wraps the ``relay_settings`` mapping of the application config. Only
    ``get``, ``as_dict`` and the convenience properties are provided.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    @property
    def base_url(self) -> str | None:
        val = self.data.get("base_url")
        return str(val) if val else None

    @property
    def model_name(self) -> str:
        return str(self.data.get("model_name") or "gpt-4o-mini")

    @property
    def api_key(self) -> str:
        """API key, preferring the ``RELAY_API_KEY`` environment variable."""
        return os.getenv("RELAY_API_KEY") or str(self.data.get("api_key") or "")

    @property
    def system_prompt(self) -> str:
        return str(self.data.get("system_prompt") or DEFAULT_SYSTEM_PROMPT)

    @property
    def max_tokens(self) -> int:
        return int(self.data.get("max_tokens", 300))
