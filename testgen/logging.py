"""Logging setup for the testgen CLI.

Console output stays short: progress and verdicts at INFO, command lines at
DEBUG with ``--verbose``. The optional log file records everything at DEBUG,
including the raw build tool output that the console only summarises.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "testgen"

# Child logger carrying the unabridged output of each build run.
BUILD_OUTPUT_LOGGER = "build.output"

_CONSOLE_FORMAT = "[testgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the testgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class _ExcludeLogger(logging.Filter):
    def __init__(self, name: str) -> None:
        super().__init__()
        self._prefix = f"{_LOGGER_NAME}.{name}"

    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(self._prefix)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the console handler and, when ``log_file`` is given, a DEBUG file sink.

    Calling it again replaces the previous handlers, so a config-supplied log
    file can take over from the one set up at startup.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    console.addFilter(_ExcludeLogger(BUILD_OUTPUT_LOGGER))
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["BUILD_OUTPUT_LOGGER", "configure_logging", "get_logger"]
