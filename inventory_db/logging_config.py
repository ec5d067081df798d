"""Logging configuration for inventory_db scripts."""

import logging
import sys


def setup_logging(level: int = logging.INFO, logger_name: str = "inventory_db") -> logging.Logger:
    """Configure and return the package logger.

    Calling it twice does not add a second handler.

    Args:
        level: Logging level (default INFO)
        logger_name: Logger to configure

    Returns:
        Configured logger
    """
    logger = logging.getLogger(logger_name)

    if logger.handlers:
        return logger

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)

    return logger
