"""Qt application entry point for the LinAccel desktop gauge.

This module wires up argument parsing, loads preferences and runtime config,
builds the :class:`~linaccel.gui.main_window.MainWindow` around a session,
and starts the Qt event loop. Preferences are written back when the loop
exits.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Tuple

from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication

from ..config.prefs import SensorPrefs, default_prefs_path, load_prefs, save_prefs
from ..config.runtime import LinAccelConfig, load_config
from ..core.session import AccelerationSession
from ..tools.logsetup import configure_logging
from ..tools.probe import build_feed
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LinAccel acceleration vector gauge")
    parser.add_argument(
        "--source",
        choices=("synthetic", "stdin"),
        default="synthetic",
        help="Sample source (default: synthetic)",
    )
    parser.add_argument("--prefs", type=Path, help="Preferences YAML (default: ~/.linaccel)")
    parser.add_argument("--config", type=Path, help="Optional runtime config YAML")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def create_app(
    argv: list[str] | None = None,
    *,
    session: AccelerationSession,
    config: LinAccelConfig | None = None,
) -> Tuple[QApplication, MainWindow]:
    """
    Create the QApplication and the main window for ``session``.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window; the caller starts and closes the session.
    """
    qt_args = argv if argv is not None else sys.argv
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    window = MainWindow(session, config=config)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    configure_logging(args.verbose)

    prefs_path = args.prefs or default_prefs_path()
    try:
        prefs = load_prefs(prefs_path)
    except ValueError:
        logger.exception("Ignoring unreadable preferences at %s", prefs_path)
        prefs = SensorPrefs()
    try:
        config = load_config(args.config)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise SystemExit(2)

    feed = build_feed(args.source, config)
    session = AccelerationSession(feed, prefs, full_scale=config.full_scale)
    app, win = create_app(qt_argv, session=session, config=config)

    win.show()
    session.start()
    try:
        code = app.exec()
    finally:
        final_prefs = session.close()
        save_prefs(final_prefs, prefs_path)
    raise SystemExit(code)


if __name__ == "__main__":
    main()
