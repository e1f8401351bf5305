"""End-to-end dispatch tests: events in, session state and frames out."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from quicknotepad.buffer import Buffer
from quicknotepad.input.events import KeyEvent, MouseEvent, MouseKind
from quicknotepad.render import RenderFrame
from quicknotepad.runtime.dispatch import EditorDispatcher
from quicknotepad.session import EditorSession
from quicknotepad.syntax import SyntaxHighlighter
from quicknotepad.viewport.geometry import ScreenPosition, TerminalSize, TextPosition
from quicknotepad.viewport.selection import SelectionState


class RecordingRenderer:
    def __init__(self) -> None:
        self.frames: list[RenderFrame] = []

    def render(self, frame: RenderFrame) -> None:
        self.frames.append(frame)


def _dispatcher(
    lines: list[str],
    path: Path | None = None,
    width: int = 40,
    height: int = 7,
) -> tuple[EditorSession, EditorDispatcher, RecordingRenderer]:
    session = EditorSession(buffer=Buffer(lines), path=path)
    renderer = RecordingRenderer()
    size = TerminalSize(width, height)
    dispatcher = EditorDispatcher(session, lambda: size, renderer, SyntaxHighlighter())
    return session, dispatcher, renderer


def _keys(dispatcher: EditorDispatcher, *keys: str) -> None:
    for key in keys:
        dispatcher.handle(KeyEvent(key))


class KeyDispatchTests(unittest.TestCase):
    def test_moves_render_after_each_event(self) -> None:
        session, dispatcher, renderer = _dispatcher(["hello", "world"])

        _keys(dispatcher, "RIGHT", "DOWN")

        self.assertEqual(len(renderer.frames), 2)
        self.assertEqual(session.caret, ScreenPosition(5, 2))
        self.assertEqual(renderer.frames[-1].caret_position, TextPosition(1, 1))

    def test_unbound_key_does_not_render(self) -> None:
        _, dispatcher, renderer = _dispatcher(["hello"])

        self.assertFalse(dispatcher.handle(KeyEvent("ESC")))
        self.assertEqual(renderer.frames, [])

    def test_shift_keys_select_and_frame_carries_range(self) -> None:
        session, dispatcher, renderer = _dispatcher(["hello", "world"])

        _keys(dispatcher, "SHIFT_RIGHT", "SHIFT_RIGHT", "SHIFT_DOWN")

        self.assertEqual(session.selection_state, SelectionState.KEYBOARD)
        self.assertEqual(renderer.frames[-1].selection, (TextPosition(0, 0), TextPosition(1, 2)))

    def test_typing_inserts_and_marks_title_modified(self) -> None:
        session, dispatcher, renderer = _dispatcher([""], path=Path("notes.txt"))

        _keys(dispatcher, "h", "i", "ENTER", "TAB", "x")

        self.assertEqual(session.buffer.lines, ["hi", "    x"])
        self.assertEqual(session.caret, ScreenPosition(9, 2))
        self.assertEqual(renderer.frames[-1].title, "notes.txt [+]")

    def test_typing_replaces_selection(self) -> None:
        session, dispatcher, _ = _dispatcher(["hello world"])

        _keys(dispatcher, "SHIFT_END", "X")

        self.assertEqual(session.buffer.lines, ["X"])
        self.assertIsNone(session.selection)
        self.assertEqual(session.selection_state, SelectionState.IDLE)

    def test_backspace_deletes_only_the_selection(self) -> None:
        session, dispatcher, _ = _dispatcher(["abc", "def"])

        with self.assertLogs("quicknotepad.runtime.dispatch", level="DEBUG") as logs:
            _keys(dispatcher, "RIGHT", "SHIFT_DOWN", "BACKSPACE")

        self.assertEqual(session.buffer.lines, ["aef"])
        self.assertEqual(session.caret, ScreenPosition(5, 1))
        self.assertIn(
            "replacing selection TextPosition(line=0, column=1)..TextPosition(line=1, column=1)",
            logs.output[-1],
        )

    def test_backspace_and_delete_without_selection(self) -> None:
        session, dispatcher, _ = _dispatcher(["ab", "cd"])

        _keys(dispatcher, "DOWN", "BACKSPACE")
        self.assertEqual(session.buffer.lines, ["abcd"])
        self.assertEqual(session.caret, ScreenPosition(6, 1))

        _keys(dispatcher, "DELETE")
        self.assertEqual(session.buffer.lines, ["abd"])

    def test_typing_at_last_column_starts_new_line(self) -> None:
        session, dispatcher, _ = _dispatcher(["abcde"], width=10)

        _keys(dispatcher, "END", "f")

        self.assertEqual(session.buffer.lines, ["abcde", "f"])
        self.assertEqual(session.caret, ScreenPosition(5, 2))

    def test_new_line_at_bottom_row_scrolls_caret_into_view(self) -> None:
        session, dispatcher, renderer = _dispatcher([f"l{idx}" for idx in range(5)])

        _keys(dispatcher, "PAGE_DOWN", "END", "ENTER")

        self.assertEqual(session.scroll_offset, 1)
        self.assertEqual(session.caret, ScreenPosition(4, 5))
        self.assertEqual(renderer.frames[-1].lines, ["l1", "l2", "l3", "l4", ""])

    def test_save_writes_file_and_reports_status(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out.txt"
            session, dispatcher, renderer = _dispatcher([""], path=path)

            _keys(dispatcher, "o", "k", "CTRL_S")

            self.assertEqual(path.read_text(encoding="utf-8"), "ok\n")
        self.assertEqual(session.status_message, "saved out.txt")
        self.assertEqual(renderer.frames[-1].title, "out.txt")

    def test_save_reports_switch_to_utf8(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            session, dispatcher, _ = _dispatcher(["x"], path=path)
            session.buffer.encoding = "latin-1"

            _keys(dispatcher, "€", "CTRL_S")

            self.assertEqual(path.read_text(encoding="utf-8"), "€x\n")
        self.assertEqual(session.status_message, "saved legacy.txt as utf-8")

    def test_save_failure_sets_status(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            session, dispatcher, _ = _dispatcher(["x"], path=Path(tmp) / "missing" / "out.txt")

            _keys(dispatcher, "y", "CTRL_S")

        self.assertTrue(session.status_message.startswith("error saving:"))
        self.assertTrue(session.buffer.modified)

    def test_save_without_path_sets_status(self) -> None:
        session, dispatcher, _ = _dispatcher(["x"])

        _keys(dispatcher, "CTRL_S")

        self.assertIn("no file name", session.status_message)

    def test_quit_sets_flag_without_rendering(self) -> None:
        session, dispatcher, renderer = _dispatcher(["x"])

        _keys(dispatcher, "CTRL_Q")

        self.assertTrue(session.quit_requested)
        self.assertEqual(renderer.frames, [])


class MouseDispatchTests(unittest.TestCase):
    def test_press_drag_release_selects_text(self) -> None:
        session, dispatcher, renderer = _dispatcher(["hello world", "second"])

        dispatcher.handle(MouseEvent(MouseKind.DOWN, 4, 1))
        dispatcher.handle(MouseEvent(MouseKind.DRAG, 9, 1))
        dispatcher.handle(MouseEvent(MouseKind.UP, 9, 1))

        self.assertEqual(len(renderer.frames), 3)
        self.assertEqual(renderer.frames[-1].selection, (TextPosition(0, 0), TextPosition(0, 5)))
        self.assertEqual(session.caret, ScreenPosition(9, 1))

    def test_drag_without_press_does_not_render(self) -> None:
        _, dispatcher, renderer = _dispatcher(["hello"])

        self.assertFalse(dispatcher.handle(MouseEvent(MouseKind.DRAG, 6, 1)))
        self.assertEqual(renderer.frames, [])

    def test_double_and_triple_click(self) -> None:
        session, dispatcher, _ = _dispatcher(["foo_bar baz"])

        dispatcher.handle(MouseEvent(MouseKind.DOUBLE_CLICK, 13, 1))
        self.assertEqual(session.selection_range(), (TextPosition(0, 8), TextPosition(0, 11)))

        dispatcher.handle(MouseEvent(MouseKind.TRIPLE_CLICK, 13, 1))
        self.assertEqual(session.selection_range(), (TextPosition(0, 0), TextPosition(0, 11)))

    def test_click_on_header_row_maps_to_first_visible_line(self) -> None:
        session, dispatcher, _ = _dispatcher(["abc", "def"])

        dispatcher.handle(MouseEvent(MouseKind.DOWN, 6, 0))

        self.assertEqual(session.caret, ScreenPosition(6, 1))

    def test_wheel_moves_caret_three_rows_and_keeps_selection(self) -> None:
        session, dispatcher, _ = _dispatcher([f"l{idx}" for idx in range(20)])
        _keys(dispatcher, "SHIFT_RIGHT")

        dispatcher.handle(MouseEvent(MouseKind.WHEEL_DOWN, 10, 3))
        dispatcher.handle(MouseEvent(MouseKind.WHEEL_DOWN, 10, 3))

        self.assertEqual(session.caret, ScreenPosition(5, 5))
        self.assertEqual(session.scroll_offset, 2)
        self.assertEqual(session.selection_range(), (TextPosition(0, 0), TextPosition(0, 1)))

        dispatcher.handle(MouseEvent(MouseKind.WHEEL_UP, 10, 3))
        self.assertEqual(session.caret, ScreenPosition(5, 2))


class FrameTests(unittest.TestCase):
    def test_frame_after_terminal_shrinks_keeps_caret_in_content_rows(self) -> None:
        session = EditorSession(buffer=Buffer([f"l{idx}" for idx in range(20)]))
        renderer = RecordingRenderer()
        sizes = [TerminalSize(40, 20)]
        dispatcher = EditorDispatcher(session, lambda: sizes[-1], renderer, SyntaxHighlighter())
        session.caret = ScreenPosition(4, 15)

        sizes.append(TerminalSize(40, 6))
        dispatcher.refresh()

        frame = renderer.frames[-1]
        self.assertEqual(frame.caret, ScreenPosition(4, 4))
        self.assertEqual(len(frame.lines), 4)
        self.assertEqual(len(frame.styled_lines), 4)


if __name__ == "__main__":
    unittest.main()
