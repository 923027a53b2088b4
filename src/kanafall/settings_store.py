"""Load and save the game settings record as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from pathlib import Path

from kanafall.config import DATA_DIR
from kanafall.models import Settings

logger = logging.getLogger(__name__)

SETTINGS_PATH = DATA_DIR / "settings.json"

_FIELD_NAMES = {f.name for f in fields(Settings)}


def settings_from_dict(data: dict) -> Settings:
    """Build Settings from a loosely-typed mapping; unknown keys are ignored."""
    values = {k: v for k, v in data.items() if k in _FIELD_NAMES}
    if "selected_stages" in values:
        values["selected_stages"] = tuple(
            int(s) for s in values["selected_stages"] if str(s).lstrip("-").isdigit()
        )
    return Settings(**values).normalized()


def load_settings(path: Path = SETTINGS_PATH) -> Settings:
    """Load settings from disk, returning defaults if absent or unreadable."""
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return settings_from_dict(data.get("game", {}))
    except Exception as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()


def save_settings(settings: Settings, path: Path = SETTINGS_PATH) -> None:
    """Persist settings, keeping any other sections already in the file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data: dict = {}
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            logger.warning("Replacing settings file %s that does not hold an object", path)
            data = {}
    record = asdict(settings)
    record["selected_stages"] = list(settings.selected_stages)
    data["game"] = record
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
