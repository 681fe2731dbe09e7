"""
Logging setup for postman_core.

Library modules only ever call ``get_logger(__name__)``; handlers are attached
once by the application (the CLI, or a caller embedding the solver) through
``setup_logging``.
"""

import logging
import sys
import time
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

ROOT_LOGGER_NAME = "postman_core"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d]: %(message)s"


def _build_handlers(
    level: int,
    formatter: logging.Formatter,
    log_file: Optional[Path],
    console: bool,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True,
    detailed: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """Attach handlers to the ``postman_core`` logger.

    Calling it again replaces the previous handlers, so the CLI can be invoked
    repeatedly in one process.

    Args:
        level: Threshold for the package logger and its handlers
        log_file: Optional rotating log file (parent directories are created)
        console: Log to stderr; stdout is reserved for route output
        detailed: Include source file and line in each record
        max_bytes: Rotate the log file after this many bytes
        backup_count: Rotated files to keep

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)

    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(DETAILED_FORMAT if detailed else CONSOLE_FORMAT)
    path = Path(log_file) if log_file is not None else None
    for handler in _build_handlers(level, formatter, path, console, max_bytes, backup_count):
        package_logger.addHandler(handler)

    package_logger.propagate = False
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger nested under ``postman_core``.

    ``get_logger("postman_core.graph")`` and ``get_logger("graph")`` return
    the same logger.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class LogTimer:
    """Time a block and log how long it took.

    The elapsed seconds stay available as ``timer.elapsed`` after the block.
    A block that raises is logged as failed, and the exception propagates.

    Example:
        >>> with LogTimer(logger, "Perfect matching over 12 odd vertices"):
        ...     partners = oracle.solve(edges, 12)
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.elapsed: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.elapsed = time.perf_counter() - self._started
        if exc_type is None:
            self.logger.log(self.level, f"{self.operation}: {self.elapsed:.2f}s")
        else:
            self.logger.log(self.level, f"{self.operation}: failed after {self.elapsed:.2f}s ({exc_type.__name__})")
        return False


def log_exception(logger: logging.Logger, message: str, exc: BaseException) -> None:
    """Log ``exc`` as an error, with the traceback at debug level only."""
    logger.error(f"{message}: {type(exc).__name__}: {exc}")
    if logger.isEnabledFor(logging.DEBUG):
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.debug(f"Traceback:\n{trace}")
