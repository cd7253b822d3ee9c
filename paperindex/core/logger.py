"""
Centralized logging setup for the paper index.

Provides console and rotating file output with configuration from config.json.
Console output goes to stderr so command results on stdout stay clean.
Uses a guard to prevent multiple initialization.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List


_logger_initialized = False
_handlers: List[logging.Handler] = []

LOG_FILENAME = "paperindex.log"


def setup_logging(
    log_level: str = "WARNING",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    logs_directory: Path = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    force: bool = False
) -> None:
    """
    Initialize the root logger with console and optional file handlers.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Format string for log messages.
        logs_directory: Directory for log files. If None, file logging disabled.
        max_file_size_mb: Maximum size of each log file in MB.
        backup_count: Number of backup files to keep.
        force: Replace handlers installed by an earlier call instead of
               keeping them.
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    root_logger = logging.getLogger()

    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if logs_directory:
        logs_directory = Path(logs_directory)
        logs_directory.mkdir(parents=True, exist_ok=True)

        log_file = logs_directory / LOG_FILENAME
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    _logger_initialized = True


def set_level(log_level: str) -> None:
    """Change the root logger level after initialization."""
    logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.WARNING))


def configure_from_config(config, force: bool = False) -> None:
    """
    Set up logging from the ``logging`` and ``paths`` sections of a config.

    Args:
        config: Loaded Config.
        force: Replace the handlers of an earlier setup.
    """
    setup_logging(
        log_level=config.logging.level,
        log_format=config.logging.format,
        logs_directory=config.paths.logs_directory,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        force=force
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Automatically initializes logging from config on first call.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Configured Logger instance.
    """
    if not _logger_initialized:
        from .config_loader import get_config
        from .exceptions import ConfigurationError

        try:
            config = get_config()
        except ConfigurationError:
            setup_logging()
        else:
            configure_from_config(config)

    return logging.getLogger(name)


if __name__ == "__main__":
    setup_logging(log_level="DEBUG")

    logger = get_logger(__name__)
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")
    logger.error("Error message")
