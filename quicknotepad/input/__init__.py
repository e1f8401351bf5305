"""Input decoding: raw key tokens, typed events and key bindings."""

from .events import ClickTracker, EventDecoder, InputEvent, KeyEvent, MouseEvent, MouseKind
from .keys import read_key
from .shortcuts import Command, resolve

__all__ = [
    "ClickTracker",
    "Command",
    "EventDecoder",
    "InputEvent",
    "KeyEvent",
    "MouseEvent",
    "MouseKind",
    "read_key",
    "resolve",
]
