"""Event dispatch for one editor session.

Routes decoded key and mouse events into the caret, selection and editing
operations, then repaints the viewport. Terminal failures raise ``OSError``
and abort the event being handled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..input.events import InputEvent, KeyEvent, MouseEvent, MouseKind
from ..input.shortcuts import (
    Command,
    DeleteBackward,
    DeleteForward,
    InsertText,
    Move,
    NewLine,
    Quit,
    Save,
    resolve,
)
from ..render import RenderFrame, ViewportRenderer
from ..session import EditorSession
from ..syntax import SyntaxHighlighter
from ..viewport.caret import CaretController, Direction
from ..viewport.geometry import CoordinateMapper, TerminalSize, TextPosition
from ..viewport.selection import SelectionController

logger = logging.getLogger(__name__)

WHEEL_STEP_ROWS = 3
UNTITLED = "untitled"


class EditorDispatcher:
    """Apply input events to a session and keep the screen in sync."""

    def __init__(
        self,
        session: EditorSession,
        get_size: Callable[[], TerminalSize],
        renderer: ViewportRenderer,
        highlighter: SyntaxHighlighter,
        tab_width: int = 4,
    ) -> None:
        self.session = session
        self.get_size = get_size
        self.renderer = renderer
        self.highlighter = highlighter
        self.tab_width = tab_width
        self.mapper = CoordinateMapper(session.buffer, session.chrome)
        self.caret = CaretController(session, self.mapper, get_size)
        self.selection = SelectionController(session, self.mapper, self.caret)
        self._mouse_handlers: dict[MouseKind, Callable[[int, int], object]] = {
            MouseKind.DOWN: self.selection.mouse_down,
            MouseKind.DRAG: self.selection.mouse_drag,
            MouseKind.UP: self.selection.mouse_up,
            MouseKind.DOUBLE_CLICK: self.selection.double_click,
            MouseKind.TRIPLE_CLICK: self.selection.triple_click,
            MouseKind.WHEEL_UP: lambda _x, _y: self._wheel(Direction.UP),
            MouseKind.WHEEL_DOWN: lambda _x, _y: self._wheel(Direction.DOWN),
        }

    def handle(self, event: InputEvent) -> bool:
        """Process one event; repaint and return ``True`` when state may have changed."""
        if isinstance(event, KeyEvent):
            command = resolve(event.key, self.tab_width)
            if command is None:
                return False
            self.run(command)
        elif isinstance(event, MouseEvent):
            handled = self._mouse_handlers[event.kind](event.x, event.y)
            if handled is False:
                return False
        else:
            return False
        if not self.session.quit_requested:
            self.refresh()
        return True

    def run(self, command: Command) -> None:
        session = self.session
        if isinstance(command, Move):
            self.selection.move(command.direction, extend=command.extend)
        elif isinstance(command, Save):
            self.save()
        elif isinstance(command, Quit):
            logger.info("quit requested")
            session.quit_requested = True
        else:
            session.status_message = ""
            self.edit(command)

    def _wheel(self, direction: Direction) -> None:
        for _ in range(WHEEL_STEP_ROWS):
            self.caret.move(direction)

    def _delete_selection(self) -> TextPosition | None:
        """Remove the selected text, if any, and clear the selection."""
        selected = self.session.selection_range()
        self.session.clear_selection()
        if selected is None:
            return None
        logger.debug("replacing selection %s..%s", *selected)
        return self.session.buffer.delete_range(*selected)

    def edit(self, command: Command) -> None:
        buffer = self.session.buffer
        metrics = self.caret.normalize()
        position = self.caret.caret_position()
        replaced = self._delete_selection()
        if replaced is not None:
            position = replaced
            if isinstance(command, (DeleteBackward, DeleteForward)):
                self.caret.place_caret(position)
                return

        if isinstance(command, InsertText):
            if self.session.chrome.margin_width + position.column >= metrics.right_col:
                position = buffer.split_line(position)
            position = buffer.insert_text(position, command.text)
        elif isinstance(command, NewLine):
            position = buffer.split_line(position)
        elif isinstance(command, DeleteBackward):
            position = buffer.delete_backward(position)
        elif isinstance(command, DeleteForward):
            position = buffer.delete_forward(position)
        self.caret.place_caret(position)

    def save(self) -> None:
        session = self.session
        if session.path is None:
            session.status_message = "no file name: start with a path to save"
            return
        encoding = session.buffer.encoding
        try:
            session.buffer.save(session.path)
        except OSError as exc:
            logger.warning("could not save %s: %s", session.path, exc)
            session.status_message = f"error saving: {exc.strerror or exc}"
            return
        session.status_message = f"saved {session.path.name}"
        if session.buffer.encoding != encoding:
            session.status_message += f" as {session.buffer.encoding}"

    def title(self) -> str:
        session = self.session
        name = session.path.name if session.path is not None else UNTITLED
        return f"{name} [+]" if session.buffer.modified else name

    def frame(self) -> RenderFrame:
        """Snapshot the visible slice, normalizing scroll and caret first."""
        metrics = self.caret.normalize()
        session = self.session
        start = session.scroll_offset
        stop = start + metrics.visible_rows
        styled = self.highlighter.highlight(session.buffer, session.path)
        return RenderFrame(
            lines=session.buffer.lines[start:stop],
            styled_lines=styled[start:stop],
            scroll_offset=start,
            caret=session.caret,
            selection=session.selection_range(),
            size=self.get_size(),
            chrome=session.chrome,
            title=self.title(),
            status=session.status_message,
            caret_position=self.caret.caret_position(),
        )

    def refresh(self) -> None:
        self.renderer.render(self.frame())
