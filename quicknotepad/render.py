"""Frame rendering for the editor viewport.

Composes the header, gutter, syntax-colored text with selection highlight and
the footer status line into one ANSI frame, then parks the terminal cursor on
the caret. Rendering never mutates session state.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Callable
from dataclasses import dataclass

from .syntax import Segment
from .viewport.geometry import Chrome, ScreenPosition, TerminalSize, TextPosition, ViewportMetrics

SELECTION_BG_SGR = "48;2;58;92;188"
GUTTER_SGR = "90"
FOOTER_SGR = "90"
KEY_HINTS = "ctrl + q = quit | ctrl + s = save"


@dataclass(frozen=True)
class RenderFrame:
    """Everything one repaint needs: the visible slice and its decorations."""

    lines: list[str]
    styled_lines: list[list[Segment]]
    scroll_offset: int
    caret: ScreenPosition
    selection: tuple[TextPosition, TextPosition] | None
    size: TerminalSize
    chrome: Chrome
    title: str = ""
    status: str = ""
    caret_position: TextPosition | None = None


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def _display_char(ch: str) -> str:
    if ch == "\t":
        return " "
    code = ord(ch)
    # C0 controls + DEL + C1 controls would act on the terminal.
    if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
        return "?"
    return ch


def selection_span_for_line(
    line_idx: int,
    line_length: int,
    selection: tuple[TextPosition, TextPosition] | None,
) -> tuple[int, int] | None:
    """Return the selected column span ``[start, end)`` on one buffer line.

    Lines that continue past the selection end are extended by one cell so the
    selected line break is visible.
    """
    if selection is None:
        return None
    start, end = selection
    if line_idx < start.line or line_idx > end.line:
        return None
    span_start = start.column if line_idx == start.line else 0
    span_end = end.column if line_idx == end.line else line_length + 1
    if span_end <= span_start:
        return None
    return span_start, span_end


def compose_text_row(
    segments: list[Segment],
    max_cols: int,
    selection_span: tuple[int, int] | None = None,
) -> str:
    """Render colored segments clipped to ``max_cols`` display columns."""
    cells: list[tuple[str, str]] = []
    for text, sgr in segments:
        for ch in text:
            cells.append((_display_char(ch), sgr))
    if selection_span is not None and selection_span[1] > len(cells):
        cells.extend((" ", "") for _ in range(selection_span[1] - len(cells)))

    out: list[str] = []
    current: str | None = None
    used = 0
    for idx, (ch, sgr) in enumerate(cells):
        width = char_display_width(ch)
        if used + width > max_cols:
            break
        params = sgr
        if selection_span is not None and selection_span[0] <= idx < selection_span[1]:
            params = f"{sgr};{SELECTION_BG_SGR}" if sgr else SELECTION_BG_SGR
        if params != current:
            out.append("\033[0m")
            if params:
                out.append(f"\033[{params}m")
            current = params
        out.append(ch)
        used += width
    if current:
        out.append("\033[0m")
    return "".join(out)


def build_status_line(left: str, right: str, width: int) -> str:
    """Left-align ``left`` and right-align ``right`` inside ``width`` columns."""
    if width <= 0:
        return ""
    if len(left) + len(right) + 1 > width:
        return left[:width]
    return left + " " * (width - len(left) - len(right)) + right


class ViewportRenderer:
    """Paint ``RenderFrame`` values through a text sink (usually the terminal).

    The frame is emitted with the cursor hidden; ``move_cursor`` then parks
    the visible cursor on the caret cell.
    """

    def __init__(
        self,
        write: Callable[[str], None],
        move_cursor: Callable[[ScreenPosition], None],
    ) -> None:
        self._write = write
        self._move_cursor = move_cursor

    def _gutter(self, line_idx: int, margin_width: int) -> str:
        if margin_width <= 0:
            return ""
        number = str(line_idx + 1)[-max(1, margin_width - 1):]
        return f"\033[{GUTTER_SGR}m{number:>{margin_width - 1}} \033[0m"

    def _content_row(self, frame: RenderFrame, row_idx: int) -> str:
        margin_width = frame.chrome.margin_width
        if row_idx >= len(frame.lines):
            return " " * margin_width
        line_idx = frame.scroll_offset + row_idx
        line = frame.lines[row_idx]
        segments = frame.styled_lines[row_idx] if row_idx < len(frame.styled_lines) else []
        if "".join(text for text, _ in segments) != line:
            segments = [(line, "")]
        span = selection_span_for_line(line_idx, len(line), frame.selection)
        text = compose_text_row(segments, max(0, frame.size.width - margin_width), span)
        return self._gutter(line_idx, margin_width) + text

    def _footer_row(self, frame: RenderFrame) -> str:
        left = KEY_HINTS
        if frame.status:
            left = f"{left} | {frame.status}"
        right = ""
        if frame.caret_position is not None:
            right = f"Ln {frame.caret_position.line + 1}, Col {frame.caret_position.column + 1}"
        return f"\033[{FOOTER_SGR}m{build_status_line(left, right, frame.size.width)}\033[0m"

    def render(self, frame: RenderFrame) -> None:
        metrics = ViewportMetrics.for_size(frame.chrome, frame.size)
        out: list[str] = ["\033[?25l"]
        for row in range(frame.size.height):
            out.append(f"\033[{row + 1};1H")
            if row < metrics.top_row:
                if row == 0:
                    out.append("\033[7m")
                    out.append(build_status_line(f" {frame.title}", "", frame.size.width))
                    out.append("\033[0m")
            elif row <= metrics.bottom_row:
                out.append(self._content_row(frame, row - metrics.top_row))
            elif row == metrics.bottom_row + 1:
                out.append(self._footer_row(frame))
            out.append("\033[K")
        self._write("".join(out))
        self._move_cursor(frame.caret)
