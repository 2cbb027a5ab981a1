"""Application settings with JSON persistence.

Settings are stored at:
    ~/.typerpg/settings.json

Usage::

    settings = load_settings()
    settings.endless_word_count = 30
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DATA_DIR = Path.home() / ".typerpg"
SETTINGS_PATH = APP_DATA_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── storage ───────────────────────────────────────────────────────
    database_url: str = f"sqlite:///{APP_DATA_DIR / 'typerpg.db'}"
    daily_progress_path: str = str(APP_DATA_DIR / "daily_progress.json")

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── gameplay ──────────────────────────────────────────────────────
    endless_word_count: int = 25
    next_quote_delay_ms: int = 1000        # cosmetic pause between quotes
    new_text_delay_ms: int = 1000          # pause before the next passage


def load_settings(path: Path = SETTINGS_PATH) -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError):
        logger.warning("Could not read %s, using defaults", path)
    return Settings()


def save_settings(settings: Settings, path: Path = SETTINGS_PATH) -> None:
    """Write settings to disk as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
