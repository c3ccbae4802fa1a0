"""
Application entry point.

Reads the logging options from the command line, builds the session model
and the main window, and runs the Qt event loop. Arguments that are not
ours are handed to QApplication (e.g. ``-style fusion``).
"""
import argparse
import logging
import sys
from typing import List, Optional, Tuple

from PySide6.QtWidgets import QApplication

from gradientslide.logging_config import setup_logging
from gradientslide.model.state import SessionState
from gradientslide.view.main_window import MainWindow, VISIBLE_APP_NAME


def parse_cli(argv: List[str]) -> Tuple[argparse.Namespace, List[str]]:
    parser = argparse.ArgumentParser(prog="gradientslide", description=VISIBLE_APP_NAME)
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument("--log-file", metavar="PATH", help="also write the log to PATH")
    return parser.parse_known_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv if argv is None else argv
    options, qt_args = parse_cli(argv[1:])
    setup_logging(level=logging.DEBUG if options.debug else logging.INFO, log_file=options.log_file)

    app = QApplication(argv[:1] + qt_args)
    app.setApplicationName(VISIBLE_APP_NAME)

    window = MainWindow(SessionState())
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
