"""
Centralized logging configuration using loguru.

Delivery logs carry the module name and, for signature rejections, the
internal failure kind. The secret is never passed to a logger.
"""
from __future__ import annotations

import sys
from typing import Any, TextIO

from loguru import logger

from webhook_handler.config import get_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>webhook-handler</magenta> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(level: str = "DEBUG", json: bool = False, sink: TextIO = sys.stderr) -> int:
    """
    Replace every loguru sink with a single one for this service.

    Args:
        level: Minimum level name, case-insensitive
        json: Write serialized records instead of the coloured format
        sink: Stream to write to

    Returns:
        The loguru handler id
    """
    logger.remove()
    logger.configure(extra={"name": "webhook_handler"})
    if json:
        return logger.add(sink, level=level.upper(), serialize=True)
    return logger.add(
        sink,
        format=LOG_FORMAT,
        level=level.upper(),
        colorize=sink in (sys.stderr, sys.stdout),
    )


_config = get_config()
configure_logging(_config.webhook_log_level, json=_config.webhook_log_json)


def get_logger(name: str = __name__) -> Any:
    """
    Get a logger bound to a specific module name.

    Usage:
        from webhook_handler.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Hello from this module")
    """
    return logger.bind(name=name)
