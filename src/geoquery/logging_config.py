"""
Logging Configuration
Sets up the logger for the 'geoquery' namespace.

Library modules only create ``logging.getLogger(__name__)`` loggers and
never add handlers; applications (and the command line) call
``setup_logging`` once.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'geoquery' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("geoquery")
    logger.setLevel(level)

    # Drop handlers from an earlier call so messages are not duplicated
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    # Console handler on stderr; stdout carries query output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
