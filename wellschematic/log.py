"""
Logging configuration for the ``wellschematic`` namespace.

The library only ever creates module loggers; applications opt in to output
by calling ``setup_logging``.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "wellschematic"


def setup_logging(
    level: int = logging.INFO, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configures the logger for the ``wellschematic`` namespace.

    Parameters
    ----------
    level: int (default: logging.INFO)
        The logging level, e.g. ``logging.DEBUG`` to trace dropped rows.
    log_file: str (default: None)
        Optional path to additionally write the log to a file.

    Returns
    -------
    logger: logging.Logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
