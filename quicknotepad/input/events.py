"""Typed input events decoded from key tokens.

Mouse tokens carry 1-based SGR coordinates; events expose 0-based terminal
cells. Repeated presses on the same cell within the double-click interval are
promoted to double and triple clicks.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Callable
from dataclasses import dataclass

DOUBLE_CLICK_SECONDS = 0.35


class MouseKind(enum.Enum):
    DOWN = "down"
    DRAG = "drag"
    UP = "up"
    DOUBLE_CLICK = "double_click"
    TRIPLE_CLICK = "triple_click"
    WHEEL_UP = "wheel_up"
    WHEEL_DOWN = "wheel_down"


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class MouseEvent:
    kind: MouseKind
    x: int
    y: int


InputEvent = KeyEvent | MouseEvent

_MOUSE_PREFIXES = {
    "MOUSE_LEFT_DOWN": MouseKind.DOWN,
    "MOUSE_LEFT_DRAG": MouseKind.DRAG,
    "MOUSE_LEFT_UP": MouseKind.UP,
    "MOUSE_WHEEL_UP": MouseKind.WHEEL_UP,
    "MOUSE_WHEEL_DOWN": MouseKind.WHEEL_DOWN,
}


def _parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


class ClickTracker:
    """Count consecutive presses on one cell to detect multi-clicks."""

    def __init__(
        self,
        double_click_seconds: float = DOUBLE_CLICK_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._double_click_seconds = double_click_seconds
        self._monotonic = monotonic
        self._last_cell: tuple[int, int] | None = None
        self._last_time = 0.0
        self._count = 0

    def press(self, x: int, y: int) -> int:
        """Register a press and return the click count (1, 2 or 3)."""
        now = self._monotonic()
        repeated = (
            self._last_cell == (x, y)
            and (now - self._last_time) <= self._double_click_seconds
            and self._count < 3
        )
        self._count = self._count + 1 if repeated else 1
        self._last_cell = (x, y)
        self._last_time = now
        return self._count


class EventDecoder:
    """Turn ``read_key`` tokens into ``KeyEvent``/``MouseEvent`` values."""

    def __init__(self, clicks: ClickTracker) -> None:
        self._clicks = clicks

    def decode(self, token: str) -> InputEvent | None:
        if not token:
            return None
        if not token.startswith("MOUSE"):
            return KeyEvent(token)

        prefix = token.split(":", 1)[0]
        kind = _MOUSE_PREFIXES.get(prefix)
        if kind is None:
            return None
        col, row = _parse_mouse_col_row(token)
        if col is None or row is None:
            return None
        x, y = max(0, col - 1), max(0, row - 1)
        if kind is MouseKind.DOWN:
            count = self._clicks.press(x, y)
            if count == 2:
                kind = MouseKind.DOUBLE_CLICK
            elif count == 3:
                kind = MouseKind.TRIPLE_CLICK
        return MouseEvent(kind, x, y)
