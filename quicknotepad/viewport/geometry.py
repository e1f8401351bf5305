"""Viewport geometry and screen/text coordinate mapping.

Converts terminal cells into logical buffer positions and back, given the
scroll offset and the fixed chrome around the content area (gutter width,
header rows, footer rows). Mapping into text always clamps instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..buffer import Buffer


@dataclass(frozen=True, order=True)
class TextPosition:
    """Logical insertion point; ordering is lexicographic on ``(line, column)``."""

    line: int
    column: int


@dataclass(frozen=True)
class ScreenPosition:
    """Zero-based terminal cell coordinates."""

    x: int
    y: int


@dataclass(frozen=True)
class TerminalSize:
    width: int
    height: int


@dataclass(frozen=True)
class Chrome:
    """Screen space reserved around the text area."""

    margin_width: int = 4
    header_rows: int = 1
    footer_rows: int = 1


@dataclass(frozen=True)
class ViewportMetrics:
    """Content-area bounds derived from chrome and the current terminal size."""

    width: int
    top_row: int
    bottom_row: int
    left_col: int
    right_col: int

    @property
    def visible_rows(self) -> int:
        return self.bottom_row - self.top_row + 1

    @classmethod
    def for_size(cls, chrome: Chrome, size: TerminalSize) -> "ViewportMetrics":
        # A terminal too small for its chrome still gets one content row and
        # one text column.
        visible_rows = max(1, size.height - chrome.header_rows - chrome.footer_rows)
        right_col = max(chrome.margin_width, size.width - 1)
        return cls(
            width=size.width,
            top_row=chrome.header_rows,
            bottom_row=chrome.header_rows + visible_rows - 1,
            left_col=chrome.margin_width,
            right_col=right_col,
        )

    def clamp_row(self, y: int) -> int:
        return max(self.top_row, min(y, self.bottom_row))

    def clamp_col(self, x: int) -> int:
        return max(self.left_col, min(x, self.right_col))


class CoordinateMapper:
    """Pure screen/text conversions bound to one buffer and its chrome."""

    def __init__(self, buffer: Buffer, chrome: Chrome) -> None:
        self.buffer = buffer
        self.chrome = chrome

    def clamp(self, position: TextPosition) -> TextPosition:
        """Pull ``position`` back inside the buffer."""
        last_line = max(0, self.buffer.line_count() - 1)
        line = max(0, min(position.line, last_line))
        column = max(0, min(position.column, self.buffer.line_length(line)))
        return TextPosition(line, column)

    def screen_to_text(self, screen_x: int, screen_y: int, scroll_offset: int) -> TextPosition:
        """Map a terminal cell to the nearest valid text position."""
        line = scroll_offset + max(0, screen_y - self.chrome.header_rows)
        column = max(0, screen_x - self.chrome.margin_width)
        return self.clamp(TextPosition(line, column))

    def text_to_screen(self, position: TextPosition, scroll_offset: int) -> ScreenPosition:
        """Map a text position to its cell; the result may lie off-screen."""
        return ScreenPosition(
            x=self.chrome.margin_width + position.column,
            y=self.chrome.header_rows + (position.line - scroll_offset),
        )

    def max_scroll_offset(self) -> int:
        return max(0, self.buffer.line_count() - 1)

    def scroll_to_reveal(self, line: int, scroll_offset: int, visible_rows: int) -> int:
        """Return the scroll offset closest to ``scroll_offset`` that shows ``line``."""
        if line < scroll_offset:
            scroll_offset = line
        elif line > scroll_offset + visible_rows - 1:
            scroll_offset = line - visible_rows + 1
        return max(0, min(scroll_offset, self.max_scroll_offset()))
