"""Logging configuration for the tutorbook process.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are installed here, once, by the CLI composition root.  Console records
go through Rich on stderr; an optional log file receives plain text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tutorbook.exceptions import EnvironmentError

LOGGER_NAME = "tutorbook"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _rich_handler(level: int) -> logging.Handler:
    """Return a ``RichHandler`` on stderr or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc

    handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Install handlers on the ``tutorbook`` logger and return it.

    Parameters
    ----------
    verbose:
        Show DEBUG records on the console instead of WARNING and up.
    log_file:
        Also append INFO-and-up records (DEBUG when *verbose*) to this file.

    Calling again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_level = logging.DEBUG if verbose else logging.WARNING
    logger.addHandler(_rich_handler(console_level))

    file_level = logging.DEBUG if verbose else logging.INFO
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(min(console_level, file_level) if log_file is not None else console_level)
    logger.propagate = False
    return logger
