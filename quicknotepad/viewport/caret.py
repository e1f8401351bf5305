"""Caret movement and scroll-offset transitions.

Every directional command is a transition of ``(caret, scroll_offset)`` for
the current buffer and terminal size. Scrolling only happens when the caret is
already pinned to the top or bottom content row.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .geometry import CoordinateMapper, ScreenPosition, TerminalSize, TextPosition, ViewportMetrics

if TYPE_CHECKING:
    from ..session import EditorSession

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    TOP = "top"
    BOTTOM = "bottom"
    MAX_LEFT = "max_left"
    MAX_RIGHT = "max_right"


class CaretController:
    """Apply ``Direction`` commands to a session's caret and scroll offset."""

    def __init__(
        self,
        session: EditorSession,
        mapper: CoordinateMapper,
        get_size: Callable[[], TerminalSize],
    ) -> None:
        """Bind the controller to a session, its mapper and a size provider.

        ``get_size`` may raise ``OSError``; the failure aborts the command in
        flight and propagates to the caller.
        """
        self.session = session
        self.mapper = mapper
        self._get_size = get_size
        self._transitions: dict[Direction, Callable[[ViewportMetrics], None]] = {
            Direction.LEFT: self._move_left,
            Direction.RIGHT: self._move_right,
            Direction.UP: self._move_up,
            Direction.DOWN: self._move_down,
            Direction.TOP: self._move_top,
            Direction.BOTTOM: self._move_bottom,
            Direction.MAX_LEFT: self._move_max_left,
            Direction.MAX_RIGHT: self._move_max_right,
        }

    def metrics(self) -> ViewportMetrics:
        return ViewportMetrics.for_size(self.session.chrome, self._get_size())

    def caret_position(self) -> TextPosition:
        """Return the logical position under the caret, clamped into the buffer."""
        caret = self.session.caret
        return self.mapper.screen_to_text(caret.x, caret.y, self.session.scroll_offset)

    def normalize(self) -> ViewportMetrics:
        """Pull scroll offset and caret back inside the buffer and content area.

        Needed after a resize or an edit that shortened the buffer.
        """
        metrics = self.metrics()
        session = self.session
        session.scroll_offset = max(0, min(session.scroll_offset, self.mapper.max_scroll_offset()))
        last_row = metrics.top_row + (self.session.buffer.line_count() - 1 - session.scroll_offset)
        y = min(metrics.clamp_row(session.caret.y), max(metrics.top_row, last_row))
        session.caret = ScreenPosition(metrics.clamp_col(session.caret.x), y)
        return metrics

    def move(self, direction: Direction) -> None:
        metrics = self.normalize()
        previous_offset = self.session.scroll_offset
        self._transitions[direction](metrics)
        if self.session.scroll_offset != previous_offset:
            logger.debug(
                "%s scrolled viewport %d -> %d",
                direction.value,
                previous_offset,
                self.session.scroll_offset,
            )

    def place_caret(self, position: TextPosition) -> None:
        """Put the caret on ``position``, scrolling just enough to show it."""
        metrics = self.metrics()
        position = self.mapper.clamp(position)
        session = self.session
        session.scroll_offset = self.mapper.scroll_to_reveal(
            position.line,
            session.scroll_offset,
            metrics.visible_rows,
        )
        screen = self.mapper.text_to_screen(position, session.scroll_offset)
        session.caret = ScreenPosition(metrics.clamp_col(screen.x), screen.y)

    def _set_caret(self, metrics: ViewportMetrics, x: int, y: int) -> None:
        self.session.caret = ScreenPosition(metrics.clamp_col(x), metrics.clamp_row(y))

    def _clamp_column(self, metrics: ViewportMetrics) -> None:
        # Moving onto a shorter line truncates the column.
        caret = self.session.caret
        line = self.caret_position().line
        column = min(caret.x - self.session.chrome.margin_width, self.session.buffer.line_length(line))
        self._set_caret(metrics, self.session.chrome.margin_width + max(0, column), caret.y)

    def _move_left(self, metrics: ViewportMetrics) -> None:
        session = self.session
        margin = session.chrome.margin_width
        pos = self.caret_position()
        if pos.column > 0:
            self._set_caret(metrics, margin + pos.column - 1, session.caret.y)
            return
        if pos.line == 0:
            return
        x = margin + session.buffer.line_length(pos.line - 1)
        if session.caret.y > metrics.top_row:
            self._set_caret(metrics, x, session.caret.y - 1)
        elif session.scroll_offset > 0:
            session.scroll_offset -= 1
            self._set_caret(metrics, x, session.caret.y)

    def _move_right(self, metrics: ViewportMetrics) -> None:
        session = self.session
        margin = session.chrome.margin_width
        pos = self.caret_position()
        at_terminal_edge = margin + pos.column >= metrics.right_col
        if pos.column < session.buffer.line_length(pos.line) and not at_terminal_edge:
            self._set_caret(metrics, margin + pos.column + 1, session.caret.y)
            return
        if pos.line + 1 >= session.buffer.line_count():
            return
        if session.caret.y < metrics.bottom_row:
            self._set_caret(metrics, margin, session.caret.y + 1)
        else:
            session.scroll_offset += 1
            self._set_caret(metrics, margin, session.caret.y)

    def _move_up(self, metrics: ViewportMetrics) -> None:
        session = self.session
        if self.caret_position().line > 0:
            if session.caret.y > metrics.top_row:
                self._set_caret(metrics, session.caret.x, session.caret.y - 1)
            else:
                session.scroll_offset -= 1
        self._clamp_column(metrics)

    def _move_down(self, metrics: ViewportMetrics) -> None:
        session = self.session
        if self.caret_position().line + 1 < session.buffer.line_count():
            if session.caret.y < metrics.bottom_row:
                self._set_caret(metrics, session.caret.x, session.caret.y + 1)
            else:
                session.scroll_offset += 1
        self._clamp_column(metrics)

    def _move_top(self, metrics: ViewportMetrics) -> None:
        self.session.scroll_offset = 0
        self._set_caret(metrics, self.session.caret.x, metrics.top_row)
        self._clamp_column(metrics)

    def _move_bottom(self, metrics: ViewportMetrics) -> None:
        session = self.session
        last_line = session.buffer.last_content_line()
        if last_line >= metrics.visible_rows:
            session.scroll_offset = last_line - metrics.visible_rows + 1
        else:
            session.scroll_offset = 0
        self._set_caret(metrics, session.caret.x, metrics.top_row + (last_line - session.scroll_offset))
        self._clamp_column(metrics)

    def _move_max_left(self, metrics: ViewportMetrics) -> None:
        self._set_caret(metrics, self.session.chrome.margin_width, self.session.caret.y)

    def _move_max_right(self, metrics: ViewportMetrics) -> None:
        line = self.caret_position().line
        line_end = self.session.chrome.margin_width + self.session.buffer.line_length(line)
        self._set_caret(metrics, min(line_end, metrics.right_col), self.session.caret.y)
