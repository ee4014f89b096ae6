"""
Logging Integration
-------------------
LogstashFormatter plugs the encoder into the standard library's logging:

    handler = logging.StreamHandler()
    handler.addFilter(DiagnosticContextFilter())
    handler.setFormatter(LogstashFormatter())

Record → event mapping:
  - created / msecs          → millis
  - levelname / levelno      → level
  - msg + args               → message template + parameters
  - module / funcName        → source class / method
  - exc_info                 → attached error (with cause chain)
  - `mdc` / `ndc` attributes → diagnostic context; set by
    DiagnosticContextFilter, via `extra=`, or read from the current
    context at format time

Handlers append their own line terminator, so format() returns the encoded
event without its trailing newline.
"""

import logging
from collections.abc import Mapping

from logstash_formatter.core.config import FormatterConfig, get_formatter_config
from logstash_formatter.core.context import get_mdc, get_ndc
from logstash_formatter.models.schemas import Level, LogEvent, ThrownError
from logstash_formatter.services.encoder import EventEncoder
from logstash_formatter.services.hostname import get_host_name


class DiagnosticContextFilter(logging.Filter):
    """
    Stamp the current MDC / NDC onto each record when it is created, so the
    context survives records that are formatted on another thread
    (QueueHandler and friends). Values passed via `extra=` take precedence.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.mdc = {**get_mdc(), **_string_map(getattr(record, "mdc", None))}
        if not getattr(record, "ndc", None):
            record.ndc = get_ndc()
        return True


class LogstashFormatter(logging.Formatter):
    def __init__(
        self,
        config: FormatterConfig | None = None,
        host_name: str | None = None,
    ):
        super().__init__()
        self.encoder = EventEncoder(
            config if config is not None else get_formatter_config(),
            host_name if host_name is not None else get_host_name(),
        )

    def format(self, record: logging.LogRecord) -> str:
        return self.encoder.encode(event_from_record(record))[:-1]


def event_from_record(record: logging.LogRecord) -> LogEvent:
    message, parameters = _template_and_parameters(record)

    thrown = None
    if record.exc_info and record.exc_info[1] is not None:
        thrown = ThrownError.from_exception(record.exc_info[1])

    mdc = getattr(record, "mdc", None)
    if mdc is None:
        mdc = get_mdc()
    ndc = getattr(record, "ndc", None)
    if ndc is None:
        ndc = get_ndc()

    return LogEvent(
        millis=int(record.created) * 1000 + int(record.msecs),
        level=Level(name=record.levelname, value=record.levelno),
        message=message,
        parameters=parameters,
        logger_name=record.name,
        thread_name=record.threadName or "",
        source_class_name=record.module,
        source_method_name=record.funcName,
        thrown=thrown,
        ndc=ndc,
        mdc=_string_map(mdc),
    )


def _template_and_parameters(record: logging.LogRecord) -> tuple[str, list | None]:
    template = record.msg if isinstance(record.msg, str) else str(record.msg)
    args = record.args

    if isinstance(args, Mapping):
        # `log.info("%(user)s", {"user": ...})` has no positional form
        try:
            return template % args, None
        except (TypeError, ValueError, KeyError):
            return template, None

    return template, list(args) if args else None


def _string_map(values: Mapping | None) -> dict[str, str]:
    if not values:
        return {}
    return {str(k): str(v) for k, v in values.items()}
