"""Logging setup for the CLI.

Library modules only do `logger = logging.getLogger(__name__)`; this module
attaches handlers to the package logger once, from the CLI entry point.
Console records go to stderr through rich so they never interleave with the
diagnostic table on stdout.
"""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = ["LOGGER_NAME", "setup_logging"]

LOGGER_NAME = "maui"

_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Configure the `maui` logger.

    Args:
        level: Log level name for the console handler.
        log_file: Optional file receiving every record at DEBUG.

    Returns:
        The configured package logger.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    effective = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if log_file else effective)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=effective == logging.DEBUG,
        markup=False,
    )
    console_handler.setLevel(effective)
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
