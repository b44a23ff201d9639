"""
Logger wrapper that carries per-comparison context.
"""

import logging
from typing import Any


class ContextLogger:
    """
    Attach fixed context (e.g. the two source labels) to every record.

    Usage:
        log = ContextLogger(__name__, left="MSSQL", right="PgSQL")
        log.info("Matching started", mode="keyed")
    """

    def __init__(self, name: str, **context: Any):
        self.logger = logging.getLogger(name)
        self.context = context

    def log(self, level: int, msg: str, *args, exc_info=None, **kwargs: Any) -> None:
        self.logger.log(level, msg, *args, exc_info=exc_info, extra={**self.context, **kwargs})

    def debug(self, msg: str, *args, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def bind(self, **context: Any) -> "ContextLogger":
        """Return a new logger with additional context."""
        return ContextLogger(self.logger.name, **{**self.context, **context})

    def get_context(self) -> dict[str, Any]:
        return dict(self.context)
