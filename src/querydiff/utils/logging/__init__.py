"""
Structured logging for querydiff.

Usage:
    import logging

    from querydiff.utils.logging import setup_logging

    setup_logging(level="INFO", json_format=True)
    logger = logging.getLogger(__name__)
    logger.info("Comparison finished", extra={"mode": "keyed", "equal": False})
"""

from .config import configure_from_env, setup_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
