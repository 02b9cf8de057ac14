"""Diagnostics (logging) setup for tmx."""

import logging
from pathlib import Path
from typing import Protocol

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from tmx.xdg_paths import get_log_file_path

LOGGER_NAME = "tmx"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Diagnostics(Protocol):
    """What the core needs to report progress; a ``logging.Logger`` fits."""

    def debug(self, msg: str) -> None: ...

    def info(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the tmx logger once at process entry.

    Log records are appended to the log file. With ``verbose`` the level drops
    to DEBUG and records are also rendered to stderr through rich, so every
    tmux command tmx issues is visible.

    Args:
        verbose: Enable debug level logging and stderr output.
        log_file: Log file path. Uses the XDG cache location if None.
        console: Console used for warnings and verbose output.

    Returns:
        The configured logger.
    """
    err_console = console or Console(stderr=True)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    path = log_file or get_log_file_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        err_console.print(f"[yellow]Warning:[/] Could not open log file {escape(str(path))}: {escape(str(e))}")
    else:
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(file_handler)

    if verbose:
        logger.addHandler(RichHandler(console=err_console, show_path=False, markup=False))

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    logger.debug(f"--- tmx started (log level: {'debug' if verbose else 'info'}) ---")
    return logger
