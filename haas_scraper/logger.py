"""Logging setup: console output plus a rotating log file."""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Union

LOGGER_NAME = "haas_scraper"
LOG_FILENAME = "scraper.log"


def setup_logger(log_dir: str = "logs", level: Union[int, str] = logging.INFO,
                 console: bool = True) -> logging.Logger:
    """Configure the package logger once; later calls return it unchanged."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers = []
    if console:
        handlers.append(logging.StreamHandler())

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        # 10MB per file, keep 5
        handlers.append(RotatingFileHandler(
            os.path.join(log_dir, LOG_FILENAME),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
