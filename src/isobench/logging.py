"""Logging setup for isobench.

Diagnostics and progress go to stderr as bare messages; stdout carries
only the benchmark report.  An optional file keeps a timestamped DEBUG
log of every go invocation.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "isobench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the ``isobench`` logger for a command-line run.

    Calling it again replaces the handlers from the previous call.  The
    logger does not propagate, so a root configuration cannot print the
    same line twice.

    Args:
        verbose: Show DEBUG messages, such as each go command line.
        quiet: Show warnings and errors only.  *verbose* wins over it.
        log_file: Also log everything at DEBUG to this file.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger ``isobench.<name>``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
