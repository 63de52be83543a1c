"""
chip8vm — Logging Setup

Library modules only call logging.getLogger(__name__). Handlers are
installed once, by the front end, through setup_logging():

  console  rich.logging.RichHandler on stderr (WARNING+ by default)
  file     optional, captures everything at DEBUG with caller info
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import (
    LOGGER_NAME,
    FILE_LOG_FORMAT,
    FILE_LOG_DATEFMT,
    DEFAULT_CONSOLE_LEVEL,
)


def setup_logging(
    name: str = LOGGER_NAME,
    console_level: int = DEFAULT_CONSOLE_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure and return the package logger.

    Calling it again replaces the handlers, so the CLI can be invoked
    repeatedly in one process (tests do this).
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)

    # ── Console handler: only important stuff unless -v ──
    ch = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    ch.setLevel(console_level)
    logger.addHandler(ch)

    # ── File handler: captures everything (DEBUG+) ──
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_LOG_DATEFMT))
        logger.addHandler(fh)
        logger.info("Log file: %s", log_path)

    return logger


def level_from_verbosity(verbose: int, quiet: bool) -> int:
    """Map -v / -q counts to a console level."""
    if quiet:
        return logging.ERROR
    if verbose == 0:
        return DEFAULT_CONSOLE_LEVEL
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG
