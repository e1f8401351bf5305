"""Command-line front door for quicknotepad.

Parses CLI options, configures logging, opens the target file and runs the
interactive editor. This is the single place fatal errors are reported.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from . import __version__
from .config import load_editor_config
from .input import shortcuts
from .input.events import ClickTracker, EventDecoder
from .logs import configure_logging
from .render import ViewportRenderer
from .runtime import EditorDispatcher, run_main_loop
from .session import EditorSession
from .syntax import SyntaxHighlighter
from .terminal import TerminalController
from .updater import Updater, UpdateCheckError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quicknotepad",
        description="Edit a text file in the terminal with mouse selection and syntax highlighting.",
    )
    parser.add_argument("path", nargs="?", default=None, help="File to edit. Created on first save if missing.")
    parser.add_argument("--style", default=None, help="Pygments style name (overrides the config file).")
    parser.add_argument("--shortcuts", action="store_true", help="Print the key bindings and exit.")
    parser.add_argument("--check-update", action="store_true", help="Check GitHub for a newer release and exit.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write the log to this file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def check_update(repo: str) -> None:
    """Print the update status; raises ``SystemExit`` when the check fails."""
    try:
        info = Updater(repo).check_for_updates()
    except UpdateCheckError as exc:
        logger.warning("update check failed: %s", exc)
        raise SystemExit(f"Update check failed: {exc}") from exc
    if info.update_available:
        sys.stdout.write(f"Update available: {info.current_version} -> {info.latest_version}\n")
        if info.download_url:
            sys.stdout.write(f"Download: {info.download_url}\n")
        if info.release_notes:
            sys.stdout.write(f"\n{info.release_notes}\n")
    else:
        sys.stdout.write(f"quicknotepad {info.current_version} is up to date.\n")


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def run_editor(session: EditorSession, style: str, tab_width: int, double_click_seconds: float) -> None:
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    dispatcher = EditorDispatcher(
        session,
        terminal.size,
        ViewportRenderer(terminal.write, terminal.move_cursor),
        SyntaxHighlighter(style),
        tab_width=tab_width,
    )
    decoder = EventDecoder(ClickTracker(double_click_seconds))
    run_main_loop(session, terminal, stdin_fd, decoder, dispatcher)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the editor.

    ``argv`` is primarily for tests; ``sys.argv`` is used when omitted.
    """
    args = build_parser().parse_args(argv)
    config = load_editor_config()
    if args.style:
        config = dataclasses.replace(config, style=args.style)

    if args.shortcuts:
        shortcuts.print_all()
        return

    try:
        log_path = configure_logging(config.log_level, args.log_file)
    except OSError as exc:
        raise SystemExit(f"Cannot open log file: {exc}") from exc
    logger.debug("logging to %s", log_path)

    if args.check_update:
        check_update(config.update_repo)
        return

    path = Path(args.path) if args.path is not None else None
    if path is not None and path.is_dir():
        raise SystemExit(f"Not a file: {path}")
    if not _is_interactive():
        raise SystemExit("quicknotepad needs an interactive terminal.")

    session = EditorSession.open(path, config.chrome())
    try:
        run_editor(session, config.style, config.tab_width, config.double_click_seconds)
    except OSError as exc:
        logger.exception("terminal failure")
        raise SystemExit(f"Terminal error: {exc}") from exc


if __name__ == "__main__":
    main()
