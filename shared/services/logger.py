"""
Logger Service - Centralized logging configuration.
"""
import logging
import sys
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Libraries that log every command or request at DEBUG/INFO
NOISY_LOGGERS = ("pymongo", "httpx", "httpcore")


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Setup root logging configuration.

    Args:
        level: Level number or name ("DEBUG", "info", ...); unknown names fall back to INFO
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a logger for a module, optionally overriding its level."""
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    return logger
