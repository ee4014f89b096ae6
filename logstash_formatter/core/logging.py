"""
Structured Logging
------------------
The package logs about itself in its own format: every line is a Logstash
event produced by LogstashFormatter, so the preview service's request logs
ship through the same pipeline as the events it renders.

Structured fields passed to log_request_event land in the record's MDC and
are encoded under `@mdc`.
"""

import logging
import sys
from typing import Any

from logstash_formatter.core.config import get_settings
from logstash_formatter.formatter import DiagnosticContextFilter, LogstashFormatter


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.addFilter(DiagnosticContextFilter())
        handler.setFormatter(LogstashFormatter())
        logger.addHandler(handler)
        logger.setLevel(get_settings().log_level.upper())
        logger.propagate = False
    return logger


def log_request_event(
    logger: logging.Logger,
    request_id: str,
    event: str,
    **kwargs: Any,
) -> None:
    """Helper that enforces a consistent request-scoped log shape."""
    logger.info(
        event,
        extra={"mdc": {"request_id": request_id, **{k: str(v) for k, v in kwargs.items()}}},
    )
