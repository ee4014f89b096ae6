import time

import pytest

from logstash_formatter.core.config import FormatterConfig
from logstash_formatter.core.context import clear_mdc, clear_ndc
from logstash_formatter.models.schemas import Level, LogEvent, StackFrame, ThrownError
from logstash_formatter.services.encoder import EventEncoder

# 2023-11-14T22:13:20.123Z
EVENT_MILLIS = 1_700_000_000_123


@pytest.fixture
def local_zone(monkeypatch):
    """Pin the process' local zone with a POSIX TZ string (no tz database needed)."""

    def _set(tz: str) -> None:
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    _set("UTC0")
    yield _set
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(autouse=True)
def clean_context():
    clear_mdc()
    clear_ndc()
    yield
    clear_mdc()
    clear_ndc()


@pytest.fixture
def cause():
    return ThrownError(
        type_name="java.lang.Exception",
        message="This is the cause",
        stack_trace=[StackFrame(class_name="Cause", method_name="methodCause", file_name="Cause.class", line_number=69)],
    )


@pytest.fixture
def thrown(cause):
    return ThrownError(
        type_name="java.lang.Exception",
        message="That is an exception",
        stack_trace=[StackFrame(class_name="Test", method_name="methodTest", file_name="Test.class", line_number=42)],
        cause=cause,
    )


@pytest.fixture
def event():
    return LogEvent(
        millis=EVENT_MILLIS,
        level=Level(name="INFO", value=800),
        message="Junit Test",
        logger_name="com.example.App",
        thread_name="main",
        source_class_name="com.example.App",
        source_method_name="testMethod",
    )


@pytest.fixture
def config():
    return FormatterConfig.from_strings(tags="foo,bar", fields="foo:bar,baz:foobar")


@pytest.fixture
def encoder(config):
    return EventEncoder(config, "test-host")
