"""
Throwable Encoding
------------------
Fields added when an event carries an error:

  line_number        always; line of the first frame, 0 if unknown
  exception_class    only when the event has a source class name
  exception_message  only when the error has a message
  stack_trace        always; JVM printStackTrace text

`exception_class` follows the presence of the event's source class name,
not of the error. Downstream consumers rely on that field-presence contract.
"""

from typing import Sequence

from logstash_formatter.models.schemas import NATIVE_LINE, LogEvent, StackFrame, ThrownError
from logstash_formatter.services.json_builder import JsonObjectBuilder


def add_throwable_info(event: LogEvent, builder: JsonObjectBuilder) -> None:
    thrown = event.thrown
    if thrown is None:
        return

    builder.add("line_number", line_number_of(event))
    if event.source_class_name is not None:
        builder.add("exception_class", thrown.type_name)
    if thrown.message is not None:
        builder.add("exception_message", thrown.message)
    builder.add("stack_trace", render_stack_trace(thrown))


def line_number_of(event: LogEvent) -> int:
    if event.thrown is None:
        return 0
    return line_number_from_stack_trace(event.thrown.stack_trace)


def line_number_from_stack_trace(frames: Sequence[StackFrame | None]) -> int:
    if len(frames) > 0 and frames[0] is not None:
        return frames[0].line_number
    return 0


# ── Stack trace text ──────────────────────────────────────────────────────────

def describe(thrown: ThrownError) -> str:
    if thrown.message is None:
        return thrown.type_name
    return f"{thrown.type_name}: {thrown.message}"


def describe_frame(frame: StackFrame) -> str:
    if frame.line_number == NATIVE_LINE:
        location = "Native Method"
    elif frame.file_name is not None and frame.line_number >= 0:
        location = f"{frame.file_name}:{frame.line_number}"
    elif frame.file_name is not None:
        location = frame.file_name
    else:
        location = "Unknown Source"
    return f"{frame.class_name}.{frame.method_name}({location})"


def render_stack_trace(thrown: ThrownError) -> str:
    """
    The error, its frames, then each cause as "Caused by: ..." with the
    frames it shares with the enclosing trace folded into "... N more".
    """
    lines = [describe(thrown)]
    lines.extend(f"\tat {describe_frame(f)}" for f in thrown.stack_trace if f is not None)

    enclosing = thrown.stack_trace
    cause = thrown.cause
    while cause is not None:
        frames = cause.stack_trace
        last = len(frames) - 1
        outer = len(enclosing) - 1
        while last >= 0 and outer >= 0 and frames[last] == enclosing[outer]:
            last -= 1
            outer -= 1
        in_common = len(frames) - 1 - last

        lines.append(f"Caused by: {describe(cause)}")
        lines.extend(f"\tat {describe_frame(f)}" for f in frames[:last + 1] if f is not None)
        if in_common:
            lines.append(f"\t... {in_common} more")

        enclosing = frames
        cause = cause.cause

    return "".join(line + "\n" for line in lines)
