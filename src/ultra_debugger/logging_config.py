"""
Logging configuration for Ultra Debugger.

Pipeline progress goes through the standard logging module under the
``ultra_debugger`` namespace. Handlers are attached to that namespace only,
never to the root logger, so embedding applications keep their own setup.
The rich handler writes to stderr; stdout is reserved for JSON reports.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "ultra_debugger"

LOG_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level_for(verbose: bool, quiet: bool) -> int:
    # quiet wins when both flags are given
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Attach a rich stderr handler (and optionally a file handler) to the
    ``ultra_debugger`` logger.

    Calling it again replaces the handlers from the previous call, so the
    CLI can be invoked repeatedly in one process.

    Args:
        verbose: DEBUG level, with source paths and traceback locals
        quiet: ERROR level only
        log_file: Append plain-text log lines to this file as well

    Returns:
        The ``ultra_debugger`` logger
    """
    level = _level_for(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(rich_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name`` inside the ``ultra_debugger`` namespace."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
