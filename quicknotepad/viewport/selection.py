"""Selection state machine shared by keyboard and mouse interaction paths.

States are Idle (no selection), Active-Keyboard (extended by shift-moves) and
Active-Mouse (extended by dragging). The caret always follows the selection's
moving end.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .caret import CaretController, Direction
from .geometry import CoordinateMapper, TextPosition, ViewportMetrics

if TYPE_CHECKING:
    from ..session import EditorSession

logger = logging.getLogger(__name__)


class SelectionState(enum.Enum):
    IDLE = "idle"
    KEYBOARD = "keyboard"
    MOUSE = "mouse"


@dataclass
class Selection:
    """Anchor plus moving cursor; empty when both ends coincide."""

    anchor: TextPosition
    cursor: TextPosition

    def is_active(self) -> bool:
        return self.anchor != self.cursor

    def normalized(self) -> tuple[TextPosition, TextPosition]:
        """Return ``(start, end)`` of the half-open selected range."""
        if self.cursor < self.anchor:
            return self.cursor, self.anchor
        return self.anchor, self.cursor


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def word_boundaries(line: str, column: int) -> tuple[int, int]:
    """Return the ``[start, end)`` columns of the word around ``column``.

    A non-word character yields just that character; a column at or past the
    end of the line yields the empty range ``(column, column)``.
    """
    if column >= len(line):
        return column, column
    if not _is_word_char(line[column]):
        return column, column + 1
    start = column
    while start > 0 and _is_word_char(line[start - 1]):
        start -= 1
    end = column
    while end < len(line) and _is_word_char(line[end]):
        end += 1
    return start, end


class SelectionController:
    """Drive a session's selection from movement and mouse events."""

    def __init__(self, session: EditorSession, mapper: CoordinateMapper, caret: CaretController) -> None:
        self.session = session
        self.mapper = mapper
        self.caret = caret

    def move(self, direction: Direction, extend: bool = False) -> None:
        """Run a caret move, extending the selection when ``extend`` is set."""
        session = self.session
        if not extend:
            session.clear_selection()
            self.caret.move(direction)
            return

        self.caret.normalize()
        selection = session.selection
        cursor = None
        if selection is None:
            anchor = self.caret.caret_position()
        else:
            anchor = selection.anchor
            cursor = self._step_past_edge(selection.cursor, direction)
        if cursor is None:
            self.caret.move(direction)
            cursor = self.caret.caret_position()
        else:
            self.caret.place_caret(cursor)
        if anchor == cursor:
            session.clear_selection()
            return
        session.selection = Selection(anchor=anchor, cursor=cursor)
        session.selection_state = SelectionState.KEYBOARD
        session.dragging = False

    def _step_past_edge(self, cursor: TextPosition, direction: Direction) -> TextPosition | None:
        """Step a cursor lying right of the last screen column in text space.

        Word and line selections can end past the terminal width, where the
        caret sits pinned at the edge. Returns ``None`` when the caret shows
        ``cursor`` and an ordinary caret move applies.
        """
        shown = self.caret.caret_position()
        if direction not in (Direction.LEFT, Direction.RIGHT):
            return None
        if shown.line != cursor.line or cursor.column <= shown.column:
            return None
        buffer = self.session.buffer
        if direction is Direction.LEFT:
            return TextPosition(cursor.line, cursor.column - 1)
        if cursor.column < buffer.line_length(cursor.line):
            return TextPosition(cursor.line, cursor.column + 1)
        if cursor.line + 1 < buffer.line_count():
            return TextPosition(cursor.line + 1, 0)
        return cursor

    def _pointer_position(self, metrics: ViewportMetrics, screen_x: int, screen_y: int) -> TextPosition:
        # Rows on the header/footer chrome resolve to the nearest content row.
        return self.mapper.screen_to_text(screen_x, metrics.clamp_row(screen_y), self.session.scroll_offset)

    def _start(self, anchor: TextPosition, cursor: TextPosition, dragging: bool) -> None:
        self.session.selection = Selection(anchor=anchor, cursor=cursor)
        self.session.selection_state = SelectionState.MOUSE
        self.session.dragging = dragging
        self.caret.place_caret(cursor)

    def mouse_down(self, screen_x: int, screen_y: int) -> None:
        metrics = self.caret.normalize()
        pos = self._pointer_position(metrics, screen_x, screen_y)
        self._start(pos, pos, dragging=True)

    def mouse_drag(self, screen_x: int, screen_y: int) -> bool:
        """Move the selection cursor under the pointer; ``False`` when not dragging."""
        session = self.session
        if not session.dragging or session.selection is None:
            return False
        metrics = self.caret.normalize()
        if screen_y < metrics.top_row and session.scroll_offset > 0:
            session.scroll_offset -= 1
        elif (
            screen_y > metrics.bottom_row
            and session.scroll_offset + metrics.visible_rows < session.buffer.line_count()
        ):
            session.scroll_offset += 1
        pos = self._pointer_position(metrics, screen_x, screen_y)
        session.selection.cursor = pos
        self.caret.place_caret(pos)
        return True

    def mouse_up(self, screen_x: int, screen_y: int) -> None:
        session = self.session
        session.dragging = False
        if session.selection is not None and not session.selection.is_active():
            session.clear_selection()

    def double_click(self, screen_x: int, screen_y: int) -> None:
        metrics = self.caret.normalize()
        pos = self._pointer_position(metrics, screen_x, screen_y)
        start, end = word_boundaries(self.session.buffer.line(pos.line), pos.column)
        logger.debug("word selection on line %d: [%d, %d)", pos.line, start, end)
        self._start(TextPosition(pos.line, start), TextPosition(pos.line, end), dragging=False)

    def triple_click(self, screen_x: int, screen_y: int) -> None:
        metrics = self.caret.normalize()
        pos = self._pointer_position(metrics, screen_x, screen_y)
        line_length = self.session.buffer.line_length(pos.line)
        self._start(TextPosition(pos.line, 0), TextPosition(pos.line, line_length), dragging=False)
