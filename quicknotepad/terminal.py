"""Terminal control helpers for the editor session.

Owns raw-mode lifecycle, alternate-screen switching, mouse reporting and the
caret shape. Size and write failures surface as ``OSError``.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

from .viewport.geometry import ScreenPosition, TerminalSize

# 1000: press/release, 1002: drag motion, 1006: SGR coordinates.
MOUSE_ON = b"\x1b[?1000h\x1b[?1002h\x1b[?1006h"
MOUSE_OFF = b"\x1b[?1000l\x1b[?1002l\x1b[?1006l"
CARET_BLINKING_BAR = b"\x1b[5 q"
CARET_DEFAULT = b"\x1b[0 q"


class TerminalController:
    """Manage terminal mode transitions and raw screen output."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen, clear it, enable mouse reporting, bar caret.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[2J" + MOUSE_ON + CARET_BLINKING_BAR)

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and disable mouse reporting."""
        os.write(self.stdout_fd, MOUSE_OFF + CARET_DEFAULT + b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def size(self) -> TerminalSize:
        """Return the terminal size; raises ``OSError`` when it cannot be queried."""
        columns, lines = os.get_terminal_size(self.stdout_fd)
        return TerminalSize(width=columns, height=lines)

    def write(self, text: str) -> None:
        data = text.encode("utf-8", errors="replace")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def move_cursor(self, position: ScreenPosition) -> None:
        """Place the visible cursor on a 0-based screen cell."""
        self.write(f"\033[{position.y + 1};{position.x + 1}H\033[?25h")

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
