"""Application settings with JSON persistence.

Settings are stored at:
    ~/.local/share/RepClock/settings.json

Usage::

    settings = load_settings()
    settings.default_rest_seconds = 90
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path


log = logging.getLogger(__name__)

APP_DIR = Path.home() / ".local" / "share" / "RepClock"
SETTINGS_PATH = APP_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    default_rest_seconds: int = 60
    rest_warning_seconds: int = 3

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── history ───────────────────────────────────────────────────────
    save_history: bool = True

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
        return Settings()
    if not isinstance(data, dict):
        log.warning("ignoring settings file %s: not a JSON object", SETTINGS_PATH)
        return Settings()
    # Only use keys that exist in the dataclass
    valid_keys = {f.name for f in fields(Settings)}
    return Settings(**{k: v for k, v in data.items() if k in valid_keys})


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
