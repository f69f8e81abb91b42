"""
Logging for polyloc.

Every module logs under the ``polyloc`` namespace. setup_logging() configures
only that logger, so embedding run_scan() in another program leaves the host's
root logger alone. Rich output always goes to stderr to keep stdout clean for
--format json/jsonl/csv.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "polyloc"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach a rich stderr handler (and optionally a file handler) to the
    polyloc logger.

    Calling it again replaces the previous handlers, so the CLI can be
    invoked repeatedly in one process (tests do this).

    Args:
        verbose: DEBUG level, with source paths and traceback locals
        quiet: ERROR level only
        log_file: Also append plain-text records to this file

    Returns:
        The polyloc package logger
    """
    level = _level_for(verbose, quiet)
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Paths in messages may contain brackets; keep rich markup off.
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
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for a module, e.g. get_logger(__name__).

    Names outside the package are nested under ``polyloc.``; None returns the
    package logger itself.
    """
    if name is None or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
