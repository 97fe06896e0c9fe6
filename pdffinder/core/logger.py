"""
Logging setup for PDF Finder.

Handlers are attached to the "pdffinder" package logger, never to the root
logger, so an embedding application keeps control of its own output. The
first get_logger() call configures them from the logging section of the
active configuration; scripts that load another config file call
setup_logging(config, force=True) to apply it.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config_loader import Config, get_config
from .exceptions import ConfigurationError


PACKAGE_LOGGER = "pdffinder"

LOG_FILENAME = "pdf_finder.log"

MB = 1024 * 1024

_logger_initialized = False


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(config: Config) -> Optional[logging.Handler]:
    """Rotating file handler in the logs directory, None when unavailable."""
    logs_directory = config.paths.logs_directory
    if not logs_directory:
        return None

    logs_directory = Path(logs_directory)
    try:
        logs_directory.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            logs_directory / LOG_FILENAME,
            maxBytes=config.logging.max_file_size_mb * MB,
            backupCount=config.logging.backup_count,
            encoding="utf-8"
        )
    except OSError as e:
        sys.stderr.write(f"File logging disabled, cannot write to {logs_directory}: {e}\n")
        return None


def setup_logging(config: Config = None, force: bool = False) -> logging.Logger:
    """
    Install console and file handlers on the package logger.

    Args:
        config: Configuration to read. Defaults to get_config(), or to the
                built-in defaults when the config file is invalid.
        force: Replace handlers installed by an earlier call.

    Returns:
        The package logger.
    """
    global _logger_initialized

    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if _logger_initialized and not force:
        return package_logger

    if config is None:
        try:
            config = get_config()
        except ConfigurationError as e:
            sys.stderr.write(f"Logging with defaults: {e.message}\n")
            config = Config.defaults()

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_handler = _file_handler(config)
    if file_handler:
        handlers.append(file_handler)

    formatter = logging.Formatter(config.logging.format)
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(_level(config.logging.level))

    _logger_initialized = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, configuring the package logger on first use.

    Args:
        name: Logger name, typically __name__ of the calling module.
    """
    if not _logger_initialized:
        setup_logging()

    return logging.getLogger(name)
