"""User configuration loaded from ~/.config/sheek/config.yaml.

The file is created with defaults on first run. Values missing from the file
fall back to DEFAULTS; invalid values are replaced by their default with a
warning.

    mode: fuzzy          # exact | fuzzy
    contextual: true     # rank by directory/repo/branch before searching
    max-items: 10
    history-file: ~/.config/sheek/.sheek_history
    logging:
      file: ~/sheek.log
      level: debug
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "sheek"
CONFIG_PATH = Path(os.environ.get("SHEEK_CONFIG") or CONFIG_DIR / "config.yaml")

DEFAULTS: dict[str, Any] = {
    "mode": "exact",
    "contextual": True,
    "max-items": 10,
    "reverse": False,
    "show-timestamp": True,
    "limit": 128,
    "placeholder": "Search History...",
    "title": "Recent Commands",
    "history-file": str(CONFIG_DIR / ".sheek_history"),
    "theme": "sheek",
    "themes": {},
    "logging": {"file": None, "level": "warning"},
}

_POSITIVE_INTS = ("max-items", "limit")
_BOOLS = ("contextual", "reverse", "show-timestamp")


def validate(config: dict[str, Any]) -> dict[str, Any]:
    """Merge config over DEFAULTS, replacing invalid values with defaults."""
    merged = copy.deepcopy(DEFAULTS)
    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value

    if merged["mode"] not in ("exact", "fuzzy"):
        log.warning("Unknown search mode %r, using 'exact'", merged["mode"])
        merged["mode"] = DEFAULTS["mode"]
    for key in _POSITIVE_INTS:
        value = merged[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            log.warning("Invalid value for %s: %r", key, value)
            merged[key] = DEFAULTS[key]
    for key in _BOOLS:
        if not isinstance(merged[key], bool):
            log.warning("Invalid value for %s: %r", key, merged[key])
            merged[key] = DEFAULTS[key]
    if not isinstance(merged["history-file"], str) or not merged["history-file"].strip():
        log.warning("Invalid value for history-file: %r", merged["history-file"])
        merged["history-file"] = DEFAULTS["history-file"]
    if not isinstance(merged["themes"], dict):
        merged["themes"] = {}
    return merged


def load(path: Path = CONFIG_PATH) -> dict[str, Any]:
    """Load config from path, creating it with defaults on first run."""
    if not path.exists():
        config = copy.deepcopy(DEFAULTS)
        try:
            _write(config, path)
        except OSError:
            log.debug("Could not create default config at %s", path, exc_info=True)
        return config

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("Failed to read config %s: %s", path, e)
        return copy.deepcopy(DEFAULTS)

    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a mapping", path)
        return copy.deepcopy(DEFAULTS)
    return validate(data)


def _write(config: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)


def save(path: Path = CONFIG_PATH) -> None:
    """Write the current CONFIG back to disk."""
    try:
        _write(CONFIG, path)
    except OSError:
        log.warning("Failed to save config to %s", path, exc_info=True)


def history_file() -> Path:
    """Configured location of the persisted log."""
    return Path(CONFIG["history-file"]).expanduser()


CONFIG = load()
