"""
Logging configuration for the emulator tools.

Library modules only create loggers (logging.getLogger(__name__)); the
CLI calls setup_logging() once to attach handlers:
  - Rich console handler at the requested level
  - optional UTF-8 file handler that captures everything (DEBUG+)
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "rv32i_emulator"

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def verbosity_to_level(verbose: int = 0, quiet: bool = False) -> int:
    """Map -v / -q counts to a logging level."""
    if quiet:
        return logging.ERROR
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    name: str = LOGGER_NAME,
) -> logging.Logger:
    """Configure and return the package logger.

    Calling it again replaces the previous handlers, so tests and
    repeated CLI invocations don't stack duplicate output.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if log_file else level)

    console = RichHandler(
        level=level,
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)

    return logger
