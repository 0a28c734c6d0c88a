"""
Logger factory: rotating file plus coloured console output.

Handlers are attached only once per logger name, so calling
``setup_logger(__name__)`` at import time of every module is safe.
"""

import os
import logging
from logging.handlers import RotatingFileHandler

from colorlog import ColoredFormatter

PROJECT_ROOT = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

LOG_FORMAT = "%(asctime)s [%(name)s:%(module)s:%(lineno)d] [%(levelname)s] %(message)s"


def setup_logger(
    name: str,
    log_dir: str = "logs",
    log_file: str = "backend.log",
    *,
    logger_level: int = logging.DEBUG,
    file_level: int = logging.DEBUG,
    console_level: int = logging.INFO,
    propagate: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Create (or return the already configured) logger ``name``.

    Args:
        name: Logger name, normally ``__name__``.
        log_dir: Log folder, relative to the project root.
        log_file: File name inside ``log_dir``.
        logger_level: Level of the logger itself.
        file_level: Level written to the file.
        console_level: Level written to the console.
        propagate: Whether records also go to the parent logger.
        max_bytes: Size at which the file is rotated.
        backup_count: Number of rotated files kept.

    Example:
        >>> logger = setup_logger(__name__, log_file="progress.log")
        >>> logger.info("Progress tracker ready")
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(logger_level)
    logger.propagate = propagate

    file_formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console_formatter = ColoredFormatter(
        "%(log_color)s" + LOG_FORMAT,
        datefmt="%H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
    )

    log_dir_abs = log_dir if os.path.isabs(log_dir) else os.path.join(PROJECT_ROOT, log_dir)
    os.makedirs(log_dir_abs, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir_abs, log_file),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    return logger
