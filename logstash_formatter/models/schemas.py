"""
Pydantic Models — Log Event / Error / API Response
--------------------------------------------------
These models serve double duty:
  1. The read-only event the encoder works from (LogEvent and friends)
  2. Request body validation and response shaping for the preview service

The encoder never mutates an event; all models are frozen.
"""

import os
from types import TracebackType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Line number sentinels carried over from JVM stack frames
UNKNOWN_LINE = -1
NATIVE_LINE = -2

# Event time range that renders in any zone: 0001-01-02 to 9999-12-30 UTC
MIN_MILLIS = -62_135_510_400_000
MAX_MILLIS = 253_402_214_399_999


# ── Event sub-models ──────────────────────────────────────────────────────────

class Level(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name, e.g. INFO.")
    value: int = Field(..., description="Numeric severity.")


class StackFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    class_name: str
    method_name: str
    file_name: str | None = None
    line_number: int = UNKNOWN_LINE


class ThrownError(BaseModel):
    """An error attached to an event, with its cause chain."""

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(..., description="Fully-qualified type name.")
    message: str | None = None
    stack_trace: list[StackFrame | None] = Field(default_factory=list)
    cause: "ThrownError | None" = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ThrownError":
        return _convert_exception(exc, set())


# ── Event root ────────────────────────────────────────────────────────────────

class LogEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    millis: int = Field(..., ge=MIN_MILLIS, le=MAX_MILLIS, description="Event time, epoch milliseconds.")
    level: Level
    message: str | None = None
    parameters: list[Any] | None = None
    logger_name: str
    thread_name: str
    source_class_name: str | None = None
    source_method_name: str | None = None
    thrown: ThrownError | None = None
    ndc: str | None = None
    mdc: dict[str, str] | None = None


# ── API Responses ─────────────────────────────────────────────────────────────

class ConfigResponse(BaseModel):
    tags: list[str]
    fields: dict[str, str]
    timezone: str | None = None


class ErrorResponse(BaseModel):
    error: str
    detail: str


# ── Python exception conversion ───────────────────────────────────────────────

def _qualified_type_name(exc_type: type) -> str:
    module = exc_type.__module__
    if module in ("builtins", "__main__"):
        return exc_type.__qualname__
    return f"{module}.{exc_type.__qualname__}"


def _frames(tb: TracebackType | None) -> list[StackFrame | None]:
    """Innermost frame first, the order a JVM stack trace is printed in."""
    frames: list[StackFrame | None] = []
    while tb is not None:
        code = tb.tb_frame.f_code
        frames.append(StackFrame(
            class_name=tb.tb_frame.f_globals.get("__name__", "?"),
            method_name=code.co_name,
            file_name=os.path.basename(code.co_filename) or None,
            line_number=tb.tb_lineno if tb.tb_lineno is not None else UNKNOWN_LINE,
        ))
        tb = tb.tb_next
    frames.reverse()
    return frames


def _convert_exception(exc: BaseException, seen: set[int]) -> ThrownError:
    seen.add(id(exc))

    cause = exc.__cause__
    if cause is None and not exc.__suppress_context__:
        cause = exc.__context__
    # a cycle in __context__ ends the chain here
    if cause is not None and id(cause) in seen:
        cause = None

    return ThrownError(
        type_name=_qualified_type_name(type(exc)),
        message=str(exc) if exc.args else None,
        stack_trace=_frames(exc.__traceback__),
        cause=_convert_exception(cause, seen) if cause is not None else None,
    )
