"""
Logging configuration for the Markdown Link Checker.
"""

import logging
import logging.handlers
from pathlib import Path

from rich.logging import RichHandler

from .config_models import Config, LoggingConfig


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _make_file_handler(filename: str, cfg: LoggingConfig) -> logging.Handler:
    Path(filename).parent.mkdir(parents=True, exist_ok=True)
    if cfg.rotation_enabled:
        return logging.handlers.TimedRotatingFileHandler(
            filename,
            when=cfg.rotation_when,
            interval=cfg.rotation_interval,
            backupCount=cfg.rotation_backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(filename, encoding="utf-8")


def setup_logging(config: Config) -> logging.Logger:
    """
    Configure logging based on Config.

    Args:
        config: Configuration object

    Returns:
        Configured root logger
    """
    log_level_str = config.logging.level
    log_level = getattr(logging, log_level_str, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    try:
        log_filename = config.logging.get_log_file_path()
        file_handler = _make_file_handler(log_filename, config.logging)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_filename}")
    except OSError as e:
        logger.error(f"Error setting up log handler: {e}")

    try:
        error_log_filename = config.logging.get_error_log_file_path()
        error_handler = _make_file_handler(error_log_filename, config.logging)
        error_handler.setLevel(logging.WARNING)  # Only WARNING and higher
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)
    except OSError as e:
        # Not fatal, console and main log still work
        logger.error(f"Error setting up error log handler: {e}")

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.debug(f"Logging initialized with level: {log_level_str}")
    return logger


def setup_basic_logging() -> logging.Logger:
    """
    Setup basic logging for early initialization.

    Returns:
        Basic logger instance
    """
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.INFO)

    console_handler = RichHandler(
        rich_tracebacks=True, markup=False, show_time=True, show_path=False
    )
    console_handler.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger("link_checker")
