"""
Logging utilities for burn-buyer.

All module loggers are children of the ``burn_buyer`` package logger, which
owns the handlers. Output goes to stdout and, when requested, to a file.
"""

import logging
import sys

PACKAGE_LOGGER = "burn_buyer"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def _package_logger(level: int) -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_formatter())
        package_logger.addHandler(console_handler)
        package_logger.setLevel(level)
    return package_logger


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger that writes through the package handlers.

    Args:
        name: Module __name__ inside the burn_buyer package
        level: Level applied when the package handler is first installed

    Returns:
        Configured logger
    """
    _package_logger(level)
    return logging.getLogger(name)


def setup_file_logging(
    filename: str = "burn_buyer.log", level: int = logging.INFO
) -> logging.FileHandler:
    """Also write package logs to ``filename``.

    Returns:
        The installed file handler
    """
    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(level)
    file_handler.setFormatter(_formatter())
    _package_logger(level).addHandler(file_handler)
    return file_handler
