import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "callcodec"


def configure_logging(level: Union[int, str] = logging.WARNING) -> logging.Logger:
    """Install a single stderr handler on the package logger."""
    if isinstance(level, str):
        level = level.upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates if re-configured
    if logger.handlers:
        logger.handlers.clear()

    # stdout carries JSON output (CLI) or the MCP stdio stream
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
