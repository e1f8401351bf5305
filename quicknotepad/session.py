"""Mutable editor session state.

One session owns the buffer, scroll offset, caret and selection. It is passed
explicitly into every controller so independent sessions never share state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .buffer import FALLBACK_ENCODING, Buffer
from .viewport.geometry import Chrome, ScreenPosition, TextPosition
from .viewport.selection import Selection, SelectionState

logger = logging.getLogger(__name__)


@dataclass
class EditorSession:
    buffer: Buffer
    chrome: Chrome = field(default_factory=Chrome)
    path: Path | None = None
    scroll_offset: int = 0
    caret: ScreenPosition | None = None
    selection: Selection | None = None
    selection_state: SelectionState = SelectionState.IDLE
    dragging: bool = False
    status_message: str = ""
    quit_requested: bool = False

    def __post_init__(self) -> None:
        if self.caret is None:
            self.caret = ScreenPosition(self.chrome.margin_width, self.chrome.header_rows)

    @classmethod
    def open(cls, path: Path | None, chrome: Chrome) -> "EditorSession":
        """Create a session for ``path``, starting empty when it cannot be read."""
        if path is None:
            return cls(buffer=Buffer(), chrome=chrome)
        if not path.exists():
            session = cls(buffer=Buffer(), chrome=chrome, path=path)
            session.status_message = f"new file: {path.name}"
            return session
        try:
            buffer = Buffer.from_path(path)
        except OSError as exc:
            logger.warning("could not open %s: %s", path, exc)
            session = cls(buffer=Buffer(), chrome=chrome, path=path)
            session.status_message = f"error opening file: {exc.strerror or exc}"
            return session
        session = cls(buffer=buffer, chrome=chrome, path=path)
        if buffer.encoding == FALLBACK_ENCODING:
            session.status_message = f"not valid utf-8: opened as {FALLBACK_ENCODING}"
        return session

    def clear_selection(self) -> None:
        if self.selection is not None:
            logger.debug("selection cleared (%s)", self.selection_state.value)
        self.selection = None
        self.selection_state = SelectionState.IDLE
        self.dragging = False

    def selection_range(self) -> tuple[TextPosition, TextPosition] | None:
        """Return the normalized selection when it covers at least one character."""
        if self.selection is None or not self.selection.is_active():
            return None
        return self.selection.normalized()
