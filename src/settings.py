"""Static configuration for filtersync.

All user-editable settings (paths, locale, loader, logging) live in a single
JSON file for quick edits without touching Python.
"""

import json
import os

from dotenv import load_dotenv

from core.config import LoaderConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Settings are loaded from config.json so users can point the app at another
# catalog or database without editing code.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(value: str) -> str:
    if os.path.isabs(value):
        return value
    return os.path.join(PROJECT_ROOT, value)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# .env values override the platform settings, e.g. FILTERSYNC_LOCALE=de-DE.
load_dotenv()

# Static filters/groups/tags metadata shipped with the application.
CATALOG_PATH = _resolve_path(_CONFIG.get("catalog_path", "data/filters.json"))

# SQLite database holding filter state, version info and custom filters.
DB_PATH = _resolve_path(_CONFIG.get("db_path", "data/filtersync.db"))

# Directory for downloaded filter bodies, one <filter_id>.txt per filter.
RULES_DIR = _resolve_path(_CONFIG.get("rules_dir", "data/rules"))

# Platform query: locale drives language filter selection, the user agent
# decides whether mobile filters are offered. Empty locale means system locale.
_platform = _CONFIG.get("platform", {})
LOCALE = os.getenv("FILTERSYNC_LOCALE") or _platform.get("locale")
USER_AGENT = os.getenv("FILTERSYNC_USER_AGENT") or _platform.get("user_agent")

# Loader settings for the shared download channel.
_loader = _CONFIG.get("loader", {})
LOADER = LoaderConfig(
    timeout=int(_loader.get("timeout", 30)),
    retries=int(_loader.get("retries", 3)),
    update_period_hours=int(_loader.get("update_period_hours", 48)),
    filter_url_template=_loader.get(
        "filter_url_template",
        "https://filters.adtidy.org/mac_v2/filters/{filter_id}.txt",
    ),
)

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
