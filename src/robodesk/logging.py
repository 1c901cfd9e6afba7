"""Logging setup for the `robodesk` logger tree."""

from __future__ import annotations

import logging as py_logging
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "robodesk"
LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
DEFAULT_LOG_PATH = Path("~/.config/robodesk/logs/robodesk.log")
_FALLBACK_LOG_PATH = Path(".robodesk/logs/robodesk.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"
_WINDOW_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def _absolute(path: Path, fallback: Path) -> Path:
    try:
        resolved = path.expanduser()
    except RuntimeError:
        resolved = fallback
    return resolved if resolved.is_absolute() else resolved.resolve()


def default_log_path() -> Path:
    return _absolute(DEFAULT_LOG_PATH, Path.cwd() / _FALLBACK_LOG_PATH)


def normalize_level(level: str) -> str:
    normalized = level.strip().upper()
    if normalized == "WARNING":
        normalized = "WARN"
    return normalized


def _file_handler(
    log_file: str | Path, formatter: py_logging.Formatter
) -> py_logging.Handler | None:
    log_path = _absolute(Path(log_file), Path(log_file))
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = py_logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(py_logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    *,
    log_file: str | Path | None = None,
) -> py_logging.Logger:
    """Reset the package logger to a stderr handler plus an optional DEBUG file.

    Handlers attached with `attach_handler` are dropped too; the log window
    re-attaches its own after the GUI starts.
    """
    resolved = LOG_LEVELS.get(normalize_level(level), py_logging.INFO)

    logger = py_logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    logger.handlers.clear()
    formatter = py_logging.Formatter(_FORMAT)

    handler = py_logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    if log_file:
        file_handler = _file_handler(log_file, formatter)
        if file_handler is not None:
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def attach_handler(handler: py_logging.Handler) -> py_logging.Handler:
    """Route package records into `handler` using the short window format."""
    if handler.formatter is None:
        handler.setFormatter(py_logging.Formatter(_WINDOW_FORMAT, datefmt="%H:%M:%S"))
    py_logging.getLogger(LOGGER_NAME).addHandler(handler)
    return handler


def detach_handler(handler: py_logging.Handler) -> None:
    py_logging.getLogger(LOGGER_NAME).removeHandler(handler)
    handler.close()
