"""Unified logging configuration for the LearnPath backend.

Provides consistent logging with both console and file output.
All module loggers live under the ``learnpath`` parent logger and
propagate to it; the parent owns the handlers.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from learnpath.settings import settings

LOG_FORMAT = "[%(asctime)s.%(msecs)03d][%(levelname)s][%(filename)s:%(lineno)d]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "learnpath"


def _ensure_app_logger_configured() -> logging.Logger:
    """Ensure the parent logger has its formatted console handler."""
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)

    has_formatted_handler = any(
        isinstance(h, logging.StreamHandler)
        and not isinstance(h, RotatingFileHandler)
        and h.formatter is not None
        and h.formatter._fmt == LOG_FORMAT
        for h in app_logger.handlers
    )

    if not has_formatted_handler:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        app_logger.addHandler(console_handler)

        app_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
        app_logger.propagate = False

    return app_logger


def setup_logging(log_name: str = "learnpath") -> logging.Logger:
    """
    Setup logging with console and rotating file output.

    Log file path: {workspace}/logs/{log_name}.log. If the directory cannot
    be created, only console output is configured.

    Args:
        log_name: The name of the log file (without .log extension).

    Returns:
        Configured parent logger
    """
    app_logger = _ensure_app_logger_configured()

    log_dir = _get_logs_root()
    if log_dir is None:
        return app_logger

    log_file_path = str(log_dir / f"{log_name}.log")
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == log_file_path for h in app_logger.handlers):
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        app_logger.addHandler(file_handler)
        app_logger.info(f"File logging enabled: {log_file_path}")

    return app_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger instance under the ``learnpath`` namespace
    """
    _ensure_app_logger_configured()

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def _get_logs_root() -> Path | None:
    logs_root = settings.get_logs_root()
    if _can_create_dir(logs_root):
        return logs_root
    return None


def _can_create_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError:
        return False


_ensure_app_logger_configured()
