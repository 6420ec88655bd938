"""Logging setup for the CLI and TUI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "habitlist"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: Union[str, int]) -> int:
    """Map a config level name ("info", "DEBUG", ...) to a logging level."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[str, int] = "info",
    log_file: Optional[Union[str, Path]] = None,
    console: bool = False,
) -> logging.Logger:
    """
    Configure the package logger.

    - File handler when log_file is given (the TUI owns the terminal, so it only logs here)
    - Rich console handler on stderr when console=True (CLI commands)

    Safe to call more than once; previous handlers are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(parse_level(level))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        logger.addHandler(fh)

    if console:
        ch = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
        ch.setLevel(logging.WARNING)
        logger.addHandler(ch)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
