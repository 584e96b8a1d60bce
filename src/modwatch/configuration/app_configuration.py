from __future__ import annotations
from pathlib import Path
import fcntl
import os
from typing import Any, Dict, List
import yaml

from modwatch.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_ACTION_LIMIT = 3
DEFAULT_WINDOW_SECONDS = 60 * 60
DEFAULT_ACTIVITY_NAME = "the mods"

LOG_CHANNEL_ENV = "MODWATCH_LOG_CHANNEL_ID"
ADMIN_ROLE_ENV = "MODWATCH_ADMIN_ROLE_ID"


def _coerce_snowflake(value: Any) -> int | None:
    """Return ``value`` as a positive snowflake int, or None when unset/invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        snowflake = int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning("[APP CONFIGURATION] Ignoring non-numeric ID value %r", value)
        return None
    return snowflake if snowflake > 0 else None


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed shortcuts for the log channel, the monitored admin role and the
    abuse policy. Channel and role IDs can be overridden through the
    ``MODWATCH_LOG_CHANNEL_ID`` and ``MODWATCH_ADMIN_ROLE_ID`` environment
    variables.
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
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def _section(self, key: str) -> Dict[str, Any]:
        section = self._data.get(key, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns an empty dict when the file is missing or unreadable.
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping (do not mutate)."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def log_channel_id(self) -> int | None:
        """ID of the channel that receives moderation and anti-abuse logs."""
        return _coerce_snowflake(os.getenv(LOG_CHANNEL_ENV) or self._data.get("log_channel_id"))

    @property
    def admin_role_id(self) -> int | None:
        """ID of the role revoked from a moderator who exceeds the limit."""
        return _coerce_snowflake(os.getenv(ADMIN_ROLE_ENV) or self._data.get("admin_role_id"))

    @property
    def action_limit(self) -> int:
        """Number of punitive actions allowed per window; one more triggers removal."""
        value = self._section("abuse_policy").get("action_limit", DEFAULT_ACTION_LIMIT)
        try:
            limit = int(value)
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid action_limit %r; using %d", value, DEFAULT_ACTION_LIMIT)
            return DEFAULT_ACTION_LIMIT
        return max(limit, 0)

    @property
    def window_seconds(self) -> float:
        """Length of the rolling abuse window in seconds. Default is one hour."""
        value = self._section("abuse_policy").get("window_seconds", DEFAULT_WINDOW_SECONDS)
        try:
            window = float(value)
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid window_seconds %r; using %d", value, DEFAULT_WINDOW_SECONDS)
            return float(DEFAULT_WINDOW_SECONDS)
        return window if window > 0 else float(DEFAULT_WINDOW_SECONDS)

    @property
    def activity_name(self) -> str:
        """Text shown in the bot's "Watching ..." presence."""
        value = self._section("presence").get("activity_name") or DEFAULT_ACTIVITY_NAME
        return str(value)

    def missing_required(self) -> List[str]:
        """Return the names of required settings that are unset."""
        missing = []
        if self.log_channel_id is None:
            missing.append("log_channel_id")
        if self.admin_role_id is None:
            missing.append("admin_role_id")
        return missing


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
