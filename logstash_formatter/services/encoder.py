"""
Event Encoder
-------------
Turns one LogEvent into one Logstash JSON line.

Key order is part of the wire contract:

  @timestamp, level, level_value, message, logger_name, thread_name,
  HOSTNAME, class, method, [throwable fields], [ndc], <custom fields>,
  @tags, [@mdc]

Bracketed keys are only present when the event carries that data. The
encoder holds no mutable state; one instance can be shared by any number
of threads.
"""

from datetime import datetime, timezone, tzinfo

from logstash_formatter.core.config import FormatterConfig
from logstash_formatter.models.schemas import LogEvent
from logstash_formatter.services.json_builder import JsonObjectBuilder
from logstash_formatter.services.message import format_message
from logstash_formatter.services.throwable import add_throwable_info

# Absent class / method names are written as this string, not as JSON null.
NULL_TEXT = "null"


def format_timestamp(millis: int, zone: tzinfo | None = None) -> str:
    """`yyyy-MM-dd'T'HH:mm:ss.SSSZZ`, e.g. 2024-03-01T14:05:09.042+0100."""
    seconds, fraction = divmod(millis, 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    moment = moment.astimezone(zone) if zone is not None else moment.astimezone()
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f".{fraction:03d}{format_offset(moment)}"
    )


def format_offset(moment: datetime) -> str:
    """`+HHMM`; seconds of historical offsets are truncated."""
    offset = int(moment.utcoffset().total_seconds())
    sign = "-" if offset < 0 else "+"
    hours, minutes = divmod(abs(offset) // 60, 60)
    return f"{sign}{hours:02d}{minutes:02d}"


def add_value(builder: JsonObjectBuilder, key: str, value: str | None) -> None:
    builder.add(key, value if value is not None else NULL_TEXT)


class EventEncoder:
    def __init__(self, config: FormatterConfig, host_name: str):
        self._config = config
        self._host_name = host_name
        self._zone = config.zone()

    @property
    def config(self) -> FormatterConfig:
        return self._config

    @property
    def host_name(self) -> str:
        return self._host_name

    def encode(self, event: LogEvent) -> str:
        return self.encode_fields(event).build() + "\n"

    def encode_fields(self, event: LogEvent) -> JsonObjectBuilder:
        builder = JsonObjectBuilder()

        builder.add("@timestamp", format_timestamp(event.millis, self._zone))
        builder.add("level", event.level.name)
        builder.add("level_value", event.level.value)
        add_value(builder, "message", self.format_message(event))
        builder.add("logger_name", event.logger_name)
        builder.add("thread_name", event.thread_name)
        builder.add("HOSTNAME", self._host_name)

        add_value(builder, "class", event.source_class_name)
        add_value(builder, "method", event.source_method_name)
        add_throwable_info(event, builder)

        if event.ndc:
            builder.add("ndc", event.ndc)

        for key, value in self._config.custom_fields:
            builder.add(key, value)

        builder.add_array("@tags", self._config.tags)

        if event.mdc:
            mdc = JsonObjectBuilder()
            for key, value in event.mdc.items():
                mdc.add(key, value)
            builder.add_object("@mdc", mdc)

        return builder

    @staticmethod
    def format_message(event: LogEvent) -> str | None:
        if event.message is None:
            return None
        return format_message(event.message, event.parameters)
