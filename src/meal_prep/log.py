"""Logging setup for the meal prep engine: Rich on stderr, optional log file."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

LOGGER_NAME = "meal_prep"

stderr_console = Console(stderr=True)


def parse_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str = "info", log_file: Path | None = None) -> logging.Logger:
    """Attach a RichHandler (and a file handler if requested) to the package logger.

    Library code only calls logging.getLogger(__name__); handlers are
    installed here, once, by the CLI.
    """
    from rich.logging import RichHandler

    log_level = parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(min(log_level, logging.DEBUG) if log_file else log_level)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = RichHandler(
        console=stderr_console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        logger.addHandler(file_handler)

    return logger
