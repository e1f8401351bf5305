"""Line-oriented text buffer owned by an editor session.

Lines are stored without trailing newlines and there is always at least one
line. Edit helpers return the position the caret should land on afterwards.
Only ``\\n`` separates lines; the file's encoding and CRLF endings are
remembered so saving writes back what was read.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from .viewport.geometry import TextPosition

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "latin-1"


def read_text(path: Path) -> tuple[str, str]:
    """Decode ``path`` and return ``(text, encoding)``."""
    data = path.read_bytes()
    encoding = "utf-8-sig" if data.startswith(codecs.BOM_UTF8) else "utf-8"
    try:
        return data.decode(encoding), encoding
    except UnicodeDecodeError:
        return data.decode(FALLBACK_ENCODING), FALLBACK_ENCODING


class Buffer:
    """Ordered sequence of text lines with simple edit operations."""

    def __init__(
        self,
        lines: list[str] | None = None,
        encoding: str = "utf-8",
        newline: str = "\n",
    ) -> None:
        self.lines: list[str] = list(lines) if lines else [""]
        self.encoding = encoding
        self.newline = newline
        self.modified = False
        # Bumped on every mutation so render caches can tell buffers apart.
        self.version = 0

    @classmethod
    def from_text(cls, text: str, encoding: str = "utf-8") -> "Buffer":
        lines = text.split("\n")
        terminated = len(lines) - 1
        if text.endswith("\n"):
            lines.pop()
            terminated = len(lines)
        newline = "\n"
        if "\n" in text and text.count("\r\n") == text.count("\n"):
            newline = "\r\n"
            for idx in range(terminated):
                lines[idx] = lines[idx][:-1]
        return cls(lines, encoding=encoding, newline=newline)

    @classmethod
    def from_path(cls, path: Path) -> "Buffer":
        """Load ``path`` into a buffer, decoding with the usual fallbacks."""
        text, encoding = read_text(path)
        buffer = cls.from_text(text, encoding=encoding)
        logger.info("loaded %s (%d lines, %s)", path, buffer.line_count(), encoding)
        return buffer

    def line_count(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> str:
        return self.lines[index]

    def line_length(self, index: int) -> int:
        return len(self.lines[index])

    def last_content_line(self) -> int:
        """Return the highest index holding non-empty text, or ``0``."""
        for idx in range(len(self.lines) - 1, -1, -1):
            if self.lines[idx]:
                return idx
        return 0

    def text(self) -> str:
        return "\n".join(self.lines)

    def _touch(self) -> None:
        self.modified = True
        self.version += 1

    def insert_text(self, position: TextPosition, text: str) -> TextPosition:
        """Insert ``text`` (no newlines) at ``position``."""
        line = self.lines[position.line]
        self.lines[position.line] = line[:position.column] + text + line[position.column:]
        self._touch()
        return TextPosition(position.line, position.column + len(text))

    def split_line(self, position: TextPosition) -> TextPosition:
        """Break the line at ``position``, moving the remainder to a new line below."""
        line = self.lines[position.line]
        self.lines[position.line] = line[:position.column]
        self.lines.insert(position.line + 1, line[position.column:])
        self._touch()
        return TextPosition(position.line + 1, 0)

    def delete_range(self, start: TextPosition, end: TextPosition) -> TextPosition:
        """Remove the half-open range ``[start, end)``, joining lines as needed."""
        if end <= start:
            return start
        head = self.lines[start.line][:start.column]
        tail = self.lines[end.line][end.column:]
        self.lines[start.line:end.line + 1] = [head + tail]
        self._touch()
        return start

    def delete_backward(self, position: TextPosition) -> TextPosition:
        if position.column > 0:
            return self.delete_range(TextPosition(position.line, position.column - 1), position)
        if position.line > 0:
            previous = TextPosition(position.line - 1, self.line_length(position.line - 1))
            return self.delete_range(previous, position)
        return position

    def delete_forward(self, position: TextPosition) -> TextPosition:
        if position.column < self.line_length(position.line):
            return self.delete_range(position, TextPosition(position.line, position.column + 1))
        if position.line + 1 < self.line_count():
            return self.delete_range(position, TextPosition(position.line + 1, 0))
        return position

    def save(self, path: Path) -> None:
        """Write lines in the buffer's encoding and line ending.

        Text the encoding cannot represent switches the buffer to UTF-8.
        Raises ``OSError`` on failure.
        """
        text = self.newline.join(self.lines) + self.newline
        try:
            data = text.encode(self.encoding)
        except UnicodeEncodeError:
            logger.warning("%s cannot encode %s; saving as utf-8", self.encoding, path)
            self.encoding = "utf-8"
            data = text.encode(self.encoding)
        path.write_bytes(data)
        self.modified = False
        logger.info("saved %s (%d lines, %s)", path, self.line_count(), self.encoding)
