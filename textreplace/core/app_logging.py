from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from textreplace.core.runtime_paths import logs_dir

PACKAGE_LOGGER = "textreplace"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


def default_log_file() -> Path:
    return logs_dir() / "textreplace.log"


def package_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_LOGGER)


def _file_handler_for(logger: logging.Logger, target: Path) -> RotatingFileHandler | None:
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == target:
            return handler
    return None


def configure_logging(log_file: Path | None = None, level: str = "INFO") -> Path:
    """Send ``textreplace.*`` records to a rotating log file.

    The handler is attached to the package logger, so a host application's root logger
    and its level are left alone. Records still propagate to the root logger. Calling
    this again for the same file only updates the level.
    """
    target = (log_file or default_log_file()).absolute()
    target.parent.mkdir(parents=True, exist_ok=True)

    logger = package_logger()
    logger.setLevel(level.upper())

    if _file_handler_for(logger, target) is not None:
        return target

    file_handler = RotatingFileHandler(
        filename=target,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(file_handler)
    logger.debug("Logging to %s", target)
    return target
