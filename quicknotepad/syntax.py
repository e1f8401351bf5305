"""Syntax coloring of buffer lines with Pygments.

Tokens are lexed over the whole buffer (so multi-line strings and comments
color correctly) and split back into per-line ``(text, sgr)`` segments. The
token-to-color table is the Pygments style.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .buffer import Buffer

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"

Segment = tuple[str, str]

_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


def sgr_for_style(style_def: dict[str, object]) -> str:
    """Translate a Pygments style entry into SGR parameters (no ESC/``m``)."""
    params: list[str] = []
    if style_def.get("bold"):
        params.append("1")
    if style_def.get("italic"):
        params.append("3")
    if style_def.get("underline"):
        params.append("4")
    color = style_def.get("color")
    if isinstance(color, str) and len(color) == 6:
        red, green, blue = (int(color[idx:idx + 2], 16) for idx in (0, 2, 4))
        params.append(f"38;2;{red};{green};{blue}")
    return ";".join(params)


class SyntaxHighlighter:
    """Per-buffer token coloring, cached on the buffer's edit version."""

    def __init__(self, style: str = DEFAULT_STYLE) -> None:
        try:
            self._style = get_style_by_name(style)
        except ClassNotFound:
            logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
            self._style = get_style_by_name(DEFAULT_STYLE)
        self._sgr_cache: dict[object, str] = {}
        self._cache_key: tuple[int, int, Path | None] | None = None
        self._cache_lines: list[list[Segment]] = []

    def _lexer_for(self, path: Path | None, text: str) -> Lexer:
        if path is None:
            return TextLexer(**_LEXER_OPTIONS)
        try:
            return get_lexer_for_filename(path.name, text, **_LEXER_OPTIONS)
        except ClassNotFound:
            return TextLexer(**_LEXER_OPTIONS)

    def token_sgr(self, token_type) -> str:
        sgr = self._sgr_cache.get(token_type)
        if sgr is None:
            sgr = sgr_for_style(self._style.style_for_token(token_type))
            self._sgr_cache[token_type] = sgr
        return sgr

    def highlight(self, buffer: Buffer, path: Path | None) -> list[list[Segment]]:
        """Return colored segments for every buffer line."""
        cache_key = (id(buffer), buffer.version, path)
        if cache_key == self._cache_key:
            return self._cache_lines

        text = buffer.text()
        lexer = self._lexer_for(path, text)
        lines: list[list[Segment]] = [[]]
        for token_type, value in lexer.get_tokens(text):
            sgr = self.token_sgr(token_type)
            for idx, piece in enumerate(value.split("\n")):
                if idx > 0:
                    lines.append([])
                if piece:
                    lines[-1].append((piece, sgr))

        count = buffer.line_count()
        lines = lines[:count] + [[] for _ in range(count - len(lines))]
        self._cache_key = cache_key
        self._cache_lines = lines
        return lines
