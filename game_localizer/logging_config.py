"""
Logging setup for the game localizer.

All modules log through children of the ``game_localizer`` logger, which owns
the only console handler.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'

LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

ROOT_LOGGER_NAME = 'game_localizer'


def setup_logger(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    detailed: bool = False
) -> logging.Logger:
    """
    Configure the package logger with a console handler and optional file handler.

    Args:
        level: Log level name ('DEBUG', 'INFO', ...)
        log_file: Also write DEBUG-level records to this file
        detailed: Include filename and line number in console output

    Returns:
        The package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(DETAILED_FORMAT if detailed else DEFAULT_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace, configuring it on first use."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logger()
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
