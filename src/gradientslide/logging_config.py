"""
Logging setup for the ``gradientslide`` logger tree.

Every module logs through ``logging.getLogger(__name__)``; this only attaches
handlers to the package root so library loggers (sympy, pyvista) keep their
own configuration.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "gradientslide"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the package's records to stdout and, optionally, to ``log_file``.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Threshold for the package logger and its handlers.
        log_file: Path of a log file, overwritten on each start.

    Returns:
        The configured package logger.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.debug(f"Logging to stdout{f' and {log_file}' if log_file else ''} at {logging.getLevelName(level)}.")
    return root
