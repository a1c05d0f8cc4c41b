"""
Logging setup for the signal-insight CLI and library.

Library modules only ever call :func:`get_logger`; handlers are installed
once by the CLI through :func:`setup_logging`. Log records go to stderr so
``--format json`` output on stdout stays machine-readable.
"""

import logging
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .exceptions import SignalError

ROOT_LOGGER = "signal_insight"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Install a rich stderr handler (plus an optional plain file handler).

    Args:
        verbose: Show DEBUG records, e.g. skipped files and cache misses
        quiet: Show only ERROR records
        log_file: Also append plain-text records to this file

    Returns:
        The package logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # paths and signal names may contain brackets; print them literally
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    # force: repeated CLI invocations in one process replace earlier handlers
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``signal_insight`` namespace.

    ``get_logger(__name__)`` inside the package returns the module logger;
    a bare name such as ``"cache"`` becomes ``signal_insight.cache``.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_signal_error(
    logger: logging.Logger, error: "SignalError", level: int = logging.DEBUG, suffix: str = ""
) -> None:
    """Log a recoverable coded error with its ``to_json()`` form on the record.

    The structured form is available to handlers as ``record.error``.
    """
    logger.log(level, f"{error}{suffix}", extra={"error": error.to_json()})
