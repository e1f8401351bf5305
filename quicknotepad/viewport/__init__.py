"""Viewport engine: coordinate mapping, caret/scroll control and selection."""

from .caret import CaretController, Direction
from .geometry import (
    Chrome,
    CoordinateMapper,
    ScreenPosition,
    TerminalSize,
    TextPosition,
    ViewportMetrics,
)
from .selection import Selection, SelectionController, SelectionState, word_boundaries

__all__ = [
    "CaretController",
    "Chrome",
    "CoordinateMapper",
    "Direction",
    "ScreenPosition",
    "Selection",
    "SelectionController",
    "SelectionState",
    "TerminalSize",
    "TextPosition",
    "ViewportMetrics",
    "word_boundaries",
]
