"""Logging setup for the termtoggle CLI and host integrations."""

from __future__ import annotations

import logging as py_logging
import os
import sys
from pathlib import Path
from typing import TextIO

LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
LOG_FILE_ENV = "TERMTOGGLE_LOG_FILE"
DEFAULT_LOG_PATH = Path("~/.config/termtoggle/logs/termtoggle.log")
_FALLBACK_LOG_PATH = Path(".termtoggle/logs/termtoggle.log")
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"
_ROOT_LOGGER = "termtoggle"


def default_log_path() -> Path:
    override = os.getenv(LOG_FILE_ENV, "").strip()
    candidate = Path(override) if override else DEFAULT_LOG_PATH
    try:
        resolved = candidate.expanduser()
    except RuntimeError:
        return (Path.cwd() / _FALLBACK_LOG_PATH).resolve()
    return resolved if resolved.is_absolute() else resolved.resolve()


def resolve_level(level: str) -> int:
    return LOG_LEVELS.get(level.strip().upper(), py_logging.INFO)


def _build_file_handler(log_file: str | Path, formatter: py_logging.Formatter) -> py_logging.Handler | None:
    try:
        log_path = Path(log_file).expanduser()
    except RuntimeError:
        log_path = Path(log_file)
    if not log_path.is_absolute():
        log_path = log_path.resolve()
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
    """Reset the package logger to one stderr handler plus an optional file handler.

    The file handler always records DEBUG so post-mortem logs include the
    terminal event trail even when the console is quiet.
    """
    resolved = resolve_level(level)
    formatter = py_logging.Formatter(_FORMAT)

    logger = py_logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(py_logging.DEBUG if log_file else resolved)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    console = py_logging.StreamHandler(stream or sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = _build_file_handler(log_file, formatter)
        if file_handler is None:
            logger.setLevel(resolved)
        else:
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger
