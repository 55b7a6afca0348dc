"""Static configuration for redscope.

User-editable tunables (polling, storage, dedup windows, notifications,
logging) live in an optional config.json. The deployment variables used by
container setups (POST_INTERVAL, POST_LIMIT, DATA_DIR) override it.
"""

import json
import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("REDSCOPE_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))

load_dotenv()


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema (optional)."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Poll cadence: minutes between cycles and items fetched per topic.
_poll = _CONFIG.get("poll", {})
POLL_INTERVAL_MINUTES = _env_int("POST_INTERVAL", _poll.get("interval_minutes", 60))
POST_LIMIT = _env_int("POST_LIMIT", _poll.get("post_limit", 5))

# The snapshot file lives in DATA_DIR; relative paths resolve from the project root.
_storage = _CONFIG.get("storage", {})
DATA_DIR = os.getenv("DATA_DIR") or _storage.get("data_dir", "data")
if not os.path.isabs(DATA_DIR):
    DATA_DIR = os.path.join(PROJECT_ROOT, DATA_DIR)

# Recency windows: restored topics keep more history than newly seen ones.
_dedup = _CONFIG.get("dedup", {})
RESTORED_CAPACITY = int(_dedup.get("restored_capacity", 1000))
FRESH_CAPACITY = int(_dedup.get("fresh_capacity", 50))

_feed = _CONFIG.get("feed", {})
FEED_TIMEOUT_SECONDS = float(_feed.get("timeout_seconds", 5))
FEED_USER_AGENT = _feed.get("user_agent", "redscope/0.1 (subreddit notifier)")

# Notification format: "markdown" or "html".
_notifications = _CONFIG.get("notifications", {})
NOTIFICATION_FORMAT = _notifications.get("format", "markdown")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
