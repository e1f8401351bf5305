"""Persistent JSON config helpers.

Stores chrome geometry, the syntax style, input timing and logging level.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .syntax import DEFAULT_STYLE
from .viewport.geometry import Chrome

APP_NAME = "quicknotepad"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_int(value: object, default: int, minimum: int) -> int:
    """Accept plain integers at or above ``minimum``; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        return default
    return value


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _coerce_str(value: object, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class EditorConfig:
    margin_width: int = 4
    header_rows: int = 1
    footer_rows: int = 1
    style: str = DEFAULT_STYLE
    double_click_seconds: float = 0.35
    tab_width: int = 4
    log_level: str = "WARNING"
    update_repo: str = "DomanskiFilip/quick_notepad"

    def chrome(self) -> Chrome:
        return Chrome(
            margin_width=self.margin_width,
            header_rows=self.header_rows,
            footer_rows=self.footer_rows,
        )

    @classmethod
    def from_mapping(cls, data: dict[str, object]) -> "EditorConfig":
        """Build a config from raw JSON data, falling back field by field."""
        defaults = cls()
        log_level = _coerce_str(data.get("log_level"), defaults.log_level).upper()
        if log_level not in LOG_LEVELS:
            log_level = defaults.log_level
        return cls(
            margin_width=_coerce_int(data.get("margin_width"), defaults.margin_width, 2),
            header_rows=_coerce_int(data.get("header_rows"), defaults.header_rows, 0),
            footer_rows=_coerce_int(data.get("footer_rows"), defaults.footer_rows, 0),
            style=_coerce_str(data.get("style"), defaults.style),
            double_click_seconds=_coerce_positive_float(
                data.get("double_click_seconds"),
                defaults.double_click_seconds,
            ),
            tab_width=_coerce_int(data.get("tab_width"), defaults.tab_width, 1),
            log_level=log_level,
            update_repo=_coerce_str(data.get("update_repo"), defaults.update_repo),
        )


def load_editor_config() -> EditorConfig:
    return EditorConfig.from_mapping(load_config())
