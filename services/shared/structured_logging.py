"""
Structured Logging Utilities

Request-scoped services log with a fixed set of context fields
(user_id, job_id, course_id, ...) rendered as ``key=value`` pairs.
"""

from __future__ import annotations

import logging
from typing import Any


def _format_context(context: dict[str, Any]) -> str:
    parts = [f"{key}={value}" for key, value in context.items() if value is not None]
    return " | ".join(parts) if parts else "none"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds structured context to log messages.

    Usage:
        logger = get_structured_logger(__name__, user_id=7, job_id=12)
        logger.info("Application submitted")
    """

    def __init__(self, logger: logging.Logger, **context: Any):
        super().__init__(logger, context)

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Attach the rendered context to the record and prefix the message with it."""
        context_str = _format_context(self.extra)
        kwargs.setdefault("extra", {})["context"] = context_str
        if context_str != "none":
            msg = f"[{context_str}] {msg}"
        return msg, kwargs

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        """Return a new adapter with extra context merged in."""
        merged = {**self.extra, **context}
        return StructuredLoggerAdapter(self.logger, **merged)


def get_structured_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """
    Get a structured logger with context.

    Args:
        name: Logger name (typically __name__)
        **context: Context fields (e.g., user_id=7, post_id=3)

    Returns:
        StructuredLoggerAdapter instance
    """
    return StructuredLoggerAdapter(logging.getLogger(name), **context)
