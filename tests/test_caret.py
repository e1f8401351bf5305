"""Tests for caret movement and scroll-offset transitions.

Terminal is 40x7 unless stated: one header row, five content rows (1..5),
one footer row and a four-column gutter.
"""

import random
import unittest

from quicknotepad.buffer import Buffer
from quicknotepad.session import EditorSession
from quicknotepad.viewport.caret import CaretController, Direction
from quicknotepad.viewport.geometry import CoordinateMapper, ScreenPosition, TerminalSize, TextPosition


def _controller(
    lines: list[str],
    caret: tuple[int, int] = (4, 1),
    scroll: int = 0,
    width: int = 40,
    height: int = 7,
) -> tuple[EditorSession, CaretController]:
    buffer = Buffer(lines)
    session = EditorSession(buffer=buffer, scroll_offset=scroll, caret=ScreenPosition(*caret))
    size = TerminalSize(width, height)
    controller = CaretController(session, CoordinateMapper(buffer, session.chrome), lambda: size)
    return session, controller


class HorizontalMoveTests(unittest.TestCase):
    def test_left_decrements_column_within_line(self) -> None:
        session, caret = _controller(["abc"], caret=(6, 1))

        caret.move(Direction.LEFT)

        self.assertEqual(session.caret, ScreenPosition(5, 1))

    def test_left_at_column_zero_moves_to_end_of_previous_line(self) -> None:
        session, caret = _controller(["abc", "d"], caret=(4, 2))

        caret.move(Direction.LEFT)

        self.assertEqual(session.caret, ScreenPosition(7, 1))
        self.assertEqual(caret.caret_position(), TextPosition(0, 3))

    def test_left_on_first_line_without_scroll_is_a_no_op(self) -> None:
        session, caret = _controller(["", "abc"], caret=(4, 1))

        caret.move(Direction.LEFT)

        self.assertEqual(session.scroll_offset, 0)
        self.assertEqual(session.caret, ScreenPosition(4, 1))

    def test_left_at_top_row_scrolls_instead_of_moving_row(self) -> None:
        session, caret = _controller(["abc", "de", "f"], caret=(4, 1), scroll=1)

        caret.move(Direction.LEFT)

        self.assertEqual(session.scroll_offset, 0)
        self.assertEqual(session.caret, ScreenPosition(7, 1))
        self.assertEqual(caret.caret_position(), TextPosition(0, 3))

    def test_right_at_end_of_line_moves_to_next_line_start(self) -> None:
        session, caret = _controller(["ab", "cd"], caret=(6, 1))

        caret.move(Direction.RIGHT)

        self.assertEqual(session.caret, ScreenPosition(4, 2))

    def test_right_at_bottom_row_scrolls(self) -> None:
        lines = [f"x{idx}" for idx in range(10)]
        session, caret = _controller(lines, caret=(6, 5))

        caret.move(Direction.RIGHT)

        self.assertEqual(session.scroll_offset, 1)
        self.assertEqual(session.caret, ScreenPosition(4, 5))
        self.assertEqual(caret.caret_position(), TextPosition(5, 0))

    def test_right_at_end_of_last_line_is_a_no_op(self) -> None:
        session, caret = _controller(["ab", "cd"], caret=(6, 2))

        caret.move(Direction.RIGHT)

        self.assertEqual(session.caret, ScreenPosition(6, 2))
        self.assertEqual(session.scroll_offset, 0)

    def test_right_at_terminal_edge_switches_to_next_line(self) -> None:
        session, caret = _controller(["abcdefghij", "k"], caret=(9, 1), width=10)

        caret.move(Direction.RIGHT)

        self.assertEqual(session.caret, ScreenPosition(4, 2))


class VerticalMoveTests(unittest.TestCase):
    def test_down_moves_row_before_scrolling(self) -> None:
        session, caret = _controller(["x"] * 10, caret=(4, 3))

        caret.move(Direction.DOWN)

        self.assertEqual(session.caret, ScreenPosition(4, 4))
        self.assertEqual(session.scroll_offset, 0)

    def test_down_at_bottom_row_scrolls(self) -> None:
        session, caret = _controller(["x"] * 10, caret=(4, 5))

        caret.move(Direction.DOWN)

        self.assertEqual(session.caret, ScreenPosition(4, 5))
        self.assertEqual(session.scroll_offset, 1)

    def test_up_at_top_row_scrolls(self) -> None:
        session, caret = _controller(["x"] * 10, caret=(4, 1), scroll=2)

        caret.move(Direction.UP)

        self.assertEqual(session.caret, ScreenPosition(4, 1))
        self.assertEqual(session.scroll_offset, 1)

    def test_moving_onto_shorter_line_truncates_column(self) -> None:
        session, caret = _controller(["abcdef", "ab"], caret=(10, 1))

        caret.move(Direction.DOWN)

        self.assertEqual(session.caret, ScreenPosition(6, 2))

    def test_up_on_first_line_and_down_on_last_line_do_nothing(self) -> None:
        session, caret = _controller(["abc", "de"], caret=(5, 1))
        caret.move(Direction.UP)
        self.assertEqual(session.caret, ScreenPosition(5, 1))

        session, caret = _controller(["abc", "de"], caret=(5, 2))
        caret.move(Direction.DOWN)
        self.assertEqual(session.caret, ScreenPosition(5, 2))
        self.assertEqual(session.scroll_offset, 0)


class JumpMoveTests(unittest.TestCase):
    def test_top_resets_scroll_and_keeps_column(self) -> None:
        session, caret = _controller([f"line{idx}" for idx in range(10)], caret=(7, 3), scroll=4)

        caret.move(Direction.TOP)

        self.assertEqual(session.scroll_offset, 0)
        self.assertEqual(session.caret, ScreenPosition(7, 1))

    def test_top_clamps_column_to_first_line(self) -> None:
        session, caret = _controller(["ab", "abcdef"], caret=(10, 2))

        caret.move(Direction.TOP)

        self.assertEqual(session.caret, ScreenPosition(6, 1))

    def test_bottom_scrolls_to_show_last_line_on_bottom_row(self) -> None:
        session, caret = _controller([f"row{idx}" for idx in range(20)], caret=(5, 1))

        caret.move(Direction.BOTTOM)

        self.assertEqual(session.scroll_offset, 15)
        self.assertEqual(session.caret, ScreenPosition(5, 5))
        self.assertEqual(caret.caret_position(), TextPosition(19, 1))

    def test_bottom_ignores_trailing_empty_lines(self) -> None:
        lines = [f"l{idx}" for idx in range(8)] + ["", "", ""]
        session, caret = _controller(lines, caret=(4, 1))

        caret.move(Direction.BOTTOM)

        self.assertEqual(session.scroll_offset, 3)
        self.assertEqual(caret.caret_position(), TextPosition(7, 0))
        self.assertEqual(session.caret.y, 5)

    def test_bottom_on_short_buffer_stays_on_last_content_line(self) -> None:
        session, caret = _controller(["a", "b", "c", "", ""], caret=(4, 1))

        caret.move(Direction.BOTTOM)

        self.assertEqual(session.scroll_offset, 0)
        self.assertEqual(session.caret, ScreenPosition(4, 3))

    def test_max_left_and_max_right(self) -> None:
        session, caret = _controller(["hello"], caret=(6, 1))

        caret.move(Direction.MAX_RIGHT)
        self.assertEqual(session.caret, ScreenPosition(9, 1))

        caret.move(Direction.MAX_LEFT)
        self.assertEqual(session.caret, ScreenPosition(4, 1))

    def test_max_right_is_capped_by_terminal_width(self) -> None:
        session, caret = _controller(["a" * 20], caret=(4, 1), width=10)

        caret.move(Direction.MAX_RIGHT)

        self.assertEqual(session.caret, ScreenPosition(9, 1))


class InvariantTests(unittest.TestCase):
    def test_caret_stays_in_content_rows_for_any_move_sequence(self) -> None:
        rng = random.Random(7)
        buffers = [
            [""],
            ["short", "", "a much longer line of text", "x", "", ""],
            [f"line {idx}" * (idx % 4) for idx in range(30)],
        ]
        directions = list(Direction)
        for lines in buffers:
            session, caret = _controller(lines)
            for _ in range(300):
                caret.move(rng.choice(directions))
                self.assertGreaterEqual(session.caret.y, 1)
                self.assertLessEqual(session.caret.y, 5)
                self.assertGreaterEqual(session.scroll_offset, 0)
                pos = caret.caret_position()
                self.assertEqual(caret.mapper.clamp(pos), pos)

    def test_normalize_pulls_state_back_after_buffer_shrinks(self) -> None:
        session, caret = _controller([f"l{idx}" for idx in range(10)], caret=(5, 5), scroll=8)
        session.buffer.delete_range(TextPosition(0, 2), TextPosition(9, 2))

        caret.normalize()

        self.assertEqual(session.scroll_offset, 0)
        self.assertEqual(session.caret, ScreenPosition(5, 1))

    def test_size_failure_propagates(self) -> None:
        buffer = Buffer(["abc"])
        session = EditorSession(buffer=buffer)

        def broken_size() -> TerminalSize:
            raise OSError("no tty")

        caret = CaretController(session, CoordinateMapper(buffer, session.chrome), broken_size)

        with self.assertRaises(OSError):
            caret.move(Direction.DOWN)


if __name__ == "__main__":
    unittest.main()
