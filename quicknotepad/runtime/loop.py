"""Main interactive event loop for the editor.

One blocking read per iteration; each event is dispatched and painted to
completion before the next one is read.
"""

from __future__ import annotations

import logging

from ..input.events import EventDecoder
from ..input.keys import read_key
from ..session import EditorSession
from ..terminal import TerminalController
from .dispatch import EditorDispatcher

logger = logging.getLogger(__name__)


def run_main_loop(
    session: EditorSession,
    terminal: TerminalController,
    stdin_fd: int,
    decoder: EventDecoder,
    dispatcher: EditorDispatcher,
) -> None:
    """Run until the session requests quit.

    ``OSError`` from the terminal propagates after raw mode is restored.
    """
    with terminal.raw_mode():
        logger.info("session started for %s", session.path or "untitled buffer")
        dispatcher.refresh()
        while not session.quit_requested:
            try:
                key = read_key(stdin_fd)
            except KeyboardInterrupt:
                # Ctrl+C arrives as a byte in raw mode; ignore stray signals.
                continue
            event = decoder.decode(key)
            if event is None:
                continue
            dispatcher.handle(event)
    logger.info("session ended")
