"""Runtime entry points: event dispatch and the interactive loop."""

from __future__ import annotations

from .dispatch import EditorDispatcher
from .loop import run_main_loop

__all__ = ["EditorDispatcher", "run_main_loop"]
