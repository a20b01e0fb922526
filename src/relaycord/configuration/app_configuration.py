from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict, List
import yaml

from relaycord.configuration.relay_settings import RelaySettings
from relaycord.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_MEDIA_EXTENSIONS = ["gif", "png", "jpg", "jpeg", "webp", "mp4"]
DEFAULT_MEDIA_DOMAINS = ["giphy.com", "tenor.com"]


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed properties for every setting the bot reads. Every property has a
    default so a missing or broken file still yields a working bot.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
        return {}

    def _section(self, key: str) -> Dict[str, Any]:
        section = self._data.get(key, {})
        return section if isinstance(section, dict) else {}

    @staticmethod
    def _string_list(value: Any, default: List[str]) -> List[str]:
        if not isinstance(value, list):
            return list(default)
        return [str(item).strip().lower() for item in value if str(item).strip()]

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Re-read the YAML file, replace the in-memory cache and return it."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """The cached configuration mapping. Callers should not mutate it."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def command_prefix(self) -> str:
        """Prefix that marks a message as a command (``!`` by default)."""
        return str(self._data.get("command_prefix") or "!")

    @property
    def timeout_minutes(self) -> int:
        """Length of the timeout applied for profanity, in minutes."""
        return int(self._section("moderation").get("timeout_minutes", 10))

    @property
    def timeout_reason(self) -> str:
        return str(self._section("moderation").get("timeout_reason") or "Inappropriate language")

    @property
    def ban_reason(self) -> str:
        return str(self._section("moderation").get("ban_reason") or "Link spam")

    @property
    def base_words(self) -> List[str]:
        """The base dictionary the word filter starts from."""
        return self._string_list(self._section("word_filter").get("base_words"), [])

    @property
    def media_extensions(self) -> List[str]:
        """File extensions (without the dot) treated as media links."""
        values = self._string_list(self._section("link_filter").get("media_extensions"), DEFAULT_MEDIA_EXTENSIONS)
        return [value.lstrip(".") for value in values]

    @property
    def media_domains(self) -> List[str]:
        """Media hosting domains whose links are always allowed."""
        return self._string_list(self._section("link_filter").get("media_domains"), DEFAULT_MEDIA_DOMAINS)

    @property
    def setup_channel_name(self) -> str:
        """Name of the channel created by the setup command."""
        return str(self._data.get("setup_channel_name") or "ai-chat")

    @property
    def relay_settings(self) -> RelaySettings:
        """Return the chat relay settings wrapped in a RelaySettings helper."""
        return RelaySettings(self._section("relay_settings"))


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
