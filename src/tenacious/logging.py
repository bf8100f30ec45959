"""Logging setup for the tenacious logger tree.

The console carries one terse line per retry event; tracebacks of recoverable
failures only reach it at DEBUG. A log file, when given, always records
everything at DEBUG with tracebacks, whatever the console level.
"""

from __future__ import annotations

import logging as py_logging
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "tenacious"
LEVEL_ALIASES = {"WARN": "WARNING"}
CONSOLE_FORMAT = "tenacious: %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    name = LEVEL_ALIASES.get(name, name)
    resolved = py_logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else py_logging.INFO


class ConsoleFormatter(py_logging.Formatter):
    def __init__(self, *, show_traces: bool) -> None:
        super().__init__(CONSOLE_FORMAT)
        self.show_traces = show_traces

    def format(self, record: py_logging.LogRecord) -> str:
        if self.show_traces or not record.exc_info:
            return super().format(record)
        saved = record.exc_info, record.exc_text
        record.exc_info, record.exc_text = None, None
        try:
            return super().format(record)
        finally:
            record.exc_info, record.exc_text = saved


def _open_log_file(log_file: str | Path) -> py_logging.Handler | None:
    path = Path(log_file).expanduser().resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = py_logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        py_logging.getLogger(LOGGER_NAME).warning("Cannot write log file %s: %s", path, exc)
        return None
    handler.setLevel(py_logging.DEBUG)
    handler.setFormatter(py_logging.Formatter(FILE_FORMAT))
    return handler


def configure_logging(
    level: str | int = "INFO",
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    console_level = resolve_level(level)
    logger = py_logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    console = py_logging.StreamHandler(stream or sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(ConsoleFormatter(show_traces=console_level <= py_logging.DEBUG))
    logger.addHandler(console)
    logger.setLevel(console_level)

    if log_file:
        file_handler = _open_log_file(log_file)
        if file_handler is not None:
            logger.addHandler(file_handler)
            logger.setLevel(py_logging.DEBUG)

    logger.propagate = False
    return logger
