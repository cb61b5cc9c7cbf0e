# src/parcel_tracking_proxy/config/logging_config.py
"""
Logging for the proxy.

Everything logs under the `parcel_tracking_proxy` package logger; modules use
child loggers (`parcel_tracking_proxy.api.ups`, `...resolution`, ...) that
inherit its handlers. The CLI configures that logger from its flags, and the
app factory makes sure it has at least a console handler when something else
(`flask run`, a WSGI server) owns the process.
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "parcel_tracking_proxy"

LINE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LevelLike = Union[int, str, None]


def resolve_level(level: LevelLike = None) -> int:
    """
    `level` as int or name ('debug', 'WARN', ...). None reads LOG_LEVEL.
    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for h in logger.handlers:
        # FileHandler is a StreamHandler too
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            if getattr(h, "stream", None) in (sys.stderr, sys.stdout):
                return h
    return None


def _file_handler(logger: logging.Logger, path: Path) -> Optional[logging.Handler]:
    target = os.path.abspath(path)
    for h in logger.handlers:
        if isinstance(h, RotatingFileHandler) and h.baseFilename == target:
            return h
    return None


def _rotating_file(path: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
        delay=True,
    )


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: LevelLike = None,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    propagate: bool = False,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure and return logger `name`. Repeated calls only add what's missing
    (console stream, rotating file), so the CLI and the app factory can both
    call it without doubling output.

    `log_file` falls back to LOG_FILE.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))
    logger.propagate = propagate
    formatter = logging.Formatter(fmt=LINE_FORMAT, datefmt=DATE_FORMAT)

    wanted = []
    if console and _console_handler(logger) is None:
        wanted.append(logging.StreamHandler(stream=sys.stderr))

    log_file = log_file if log_file is not None else (os.getenv("LOG_FILE") or None)
    if log_file is not None:
        path = Path(log_file)
        if _file_handler(logger, path) is None:
            wanted.append(_rotating_file(path, max_bytes, backup_count))

    for handler in wanted:
        handler.setFormatter(formatter)
        handler.setLevel(logger.level)
        logger.addHandler(handler)
    return logger


def ensure_package_logger() -> logging.Logger:
    """
    The package logger, configured from LOG_LEVEL / LOG_FILE if nobody has
    set it up yet. An already configured logger is returned untouched.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if logger.handlers:
        return logger
    return get_logger(ROOT_LOGGER_NAME)


__all__ = [
    "ROOT_LOGGER_NAME",
    "resolve_level",
    "get_logger",
    "ensure_package_logger",
]
