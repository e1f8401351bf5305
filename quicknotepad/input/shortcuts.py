"""Key bindings: resolve key tokens into editor commands.

The table below is also what ``--shortcuts`` prints.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

from ..viewport.caret import Direction


@dataclass(frozen=True)
class Move:
    direction: Direction
    extend: bool = False


@dataclass(frozen=True)
class InsertText:
    text: str


@dataclass(frozen=True)
class NewLine:
    pass


@dataclass(frozen=True)
class DeleteBackward:
    pass


@dataclass(frozen=True)
class DeleteForward:
    pass


@dataclass(frozen=True)
class Save:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Command = Move | InsertText | NewLine | DeleteBackward | DeleteForward | Save | Quit

_MOVE_KEYS: dict[str, Direction] = {
    "LEFT": Direction.LEFT,
    "RIGHT": Direction.RIGHT,
    "UP": Direction.UP,
    "DOWN": Direction.DOWN,
    "PAGE_UP": Direction.TOP,
    "PAGE_DOWN": Direction.BOTTOM,
    "HOME": Direction.MAX_LEFT,
    "END": Direction.MAX_RIGHT,
}

_FIXED_KEYS: dict[str, Command] = {
    "ENTER": NewLine(),
    "BACKSPACE": DeleteBackward(),
    "DELETE": DeleteForward(),
    "CTRL_S": Save(),
    "CTRL_Q": Quit(),
}

SHORTCUTS: tuple[tuple[str, str], ...] = (
    ("Arrow keys", "move caret"),
    ("Shift + arrow keys", "extend selection"),
    ("Home / End", "start / end of line"),
    ("Page Up / Page Down", "first line / last line"),
    ("Shift + Home/End/PgUp/PgDn", "extend selection"),
    ("Mouse drag", "select text"),
    ("Double click", "select word"),
    ("Triple click", "select line"),
    ("Enter", "new line"),
    ("Backspace / Delete", "delete character or selection"),
    ("Tab", "insert spaces"),
    ("Ctrl + S", "save"),
    ("Ctrl + Q", "quit"),
)


def resolve(key: str, tab_width: int = 4) -> Command | None:
    """Map one key token to a command, or ``None`` when it is unbound."""
    direction = _MOVE_KEYS.get(key)
    if direction is not None:
        return Move(direction)
    if key.startswith("SHIFT_"):
        direction = _MOVE_KEYS.get(key[len("SHIFT_"):])
        if direction is not None:
            return Move(direction, extend=True)
        return None
    command = _FIXED_KEYS.get(key)
    if command is not None:
        return command
    if key == "TAB":
        return InsertText(" " * max(1, tab_width))
    if len(key) == 1 and key.isprintable():
        return InsertText(key)
    return None


def print_all(stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    width = max(len(keys) for keys, _ in SHORTCUTS)
    for keys, description in SHORTCUTS:
        out.write(f"{keys:<{width}}  {description}\n")
