"""Centralized logging configuration for Remembered Service.

Every module gets its own named logger writing to a rotating file plus the
console. Level and log directory come from settings.
"""

import logging
from logging.handlers import RotatingFileHandler
import os

from config import settings

LOG_DIR = (
    settings.LOG_DIR
    if os.path.isabs(settings.LOG_DIR)
    else os.path.join(os.path.dirname(os.path.abspath(__file__)), settings.LOG_DIR)
)
os.makedirs(LOG_DIR, exist_ok=True)

LOG_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, log_file: str = 'service.log') -> logging.Logger:
    """Setup a named logger with file rotation and console output.

    Args:
        name: Logger name (usually __name__)
        log_file: Log file name (e.g., 'parser.log', 'api.log')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # File handler - 10MB max, keep 5 backups
    file_handler = RotatingFileHandler(
        os.path.join(LOG_DIR, log_file),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def configure_root_logger():
    """Reduce third-party library noise."""
    for noisy in ('uvicorn', 'uvicorn.access', 'fastapi', 'sqlalchemy',
                  'dateparser', 'tzlocal', 'httpx', 'httpcore', 'mcp'):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# Auto-configure on import
configure_root_logger()
