"""
Logging infrastructure.

Every service module logs through get_logger() at INFO; create_app()
calls configure_logging() to apply AppSettings.log_level
(ORDER_SERVICE_LOG_LEVEL) to those loggers.
"""
import logging
from typing import Optional, Set

from core.settings import get_app_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_service_loggers: Set[str] = set()


def _resolve_level(level: Optional[str]) -> int:
    name = (level or get_app_settings().log_level).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance.

    Args:
        name: Logger name (usually module name)

    Returns:
        Logger with a stream handler
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    _service_loggers.add(name)
    return logger


def configure_logging(level: Optional[str] = None) -> int:
    """
    Apply a level to every logger handed out by get_logger().

    Args:
        level: Level name (DEBUG, INFO, ...); settings value when omitted

    Returns:
        Numeric level applied
    """
    resolved = _resolve_level(level)
    for name in _service_loggers:
        logging.getLogger(name).setLevel(resolved)
    return resolved
