"""
Positional Substitution
-----------------------
Renders `{0}`-style templates with the rules of the JVM's MessageFormat,
which is what `{n}` placeholders in logging calls have always meant:

  - `'` quotes literal text, `''` is a literal apostrophe
  - `{n}`, `{n,number}`, `{n,number,integer|percent}`
  - an index past the end of the arguments is left as `{n}`
  - None renders as `null`, bools as `true` / `false`
  - numbers use the default `#,##0.###` pattern (grouped, half-even)

Anything this renderer does not understand (unmatched braces, bad index,
date/time/choice formats, custom number patterns) is reported as a failure
so the caller can fall back to printf-style substitution.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from typing import Any, Sequence

from logstash_formatter.services.result import FormatResult

_INDEX = re.compile(r"[+-]?[0-9]+")
_MAX_INDEX = 2**31 - 1

_TYPE_NUMBER = "number"
_UNSUPPORTED_TYPES = frozenset({"date", "time", "choice"})


def format_positional(pattern: str, args: Sequence[Any]) -> FormatResult:
    out: list[str] = []
    in_quote = False
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]
        if ch == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                out.append("'")
                i += 1
            else:
                in_quote = not in_quote
        elif ch == "{" and not in_quote:
            end, segments, depth = _scan_argument(pattern, i + 1)
            if end is None:
                if depth == 0:
                    return FormatResult.failure("Unmatched braces in the pattern.")
                # an argument left open inside nested braces is dropped
                break
            rendered = _render_argument(segments, args)
            if not rendered.ok:
                return rendered
            out.append(rendered.text)
            i = end
        else:
            out.append(ch)
        i += 1

    return FormatResult.success("".join(out))


def _scan_argument(pattern: str, start: int) -> tuple[int | None, list[str], int]:
    """
    Collect the index, type and style segments of one `{...}` argument.
    Returns the position of the closing brace, or None when it never closes.
    """
    segments = ["", "", ""]
    part = 0
    depth = 0
    in_quote = False

    for i in range(start, len(pattern)):
        ch = pattern[i]
        if in_quote:
            segments[part] += ch
            if ch == "'":
                in_quote = False
        elif ch == ",":
            if part < 2:
                part += 1
            else:
                segments[part] += ch
        elif ch == "{":
            depth += 1
            segments[part] += ch
        elif ch == "}":
            if depth == 0:
                return i, segments, depth
            depth -= 1
            segments[part] += ch
        elif ch == " ":
            # leading spaces of the type are skipped
            if part != 1 or segments[1]:
                segments[part] += ch
        else:
            if ch == "'":
                in_quote = True
            segments[part] += ch

    return None, segments, depth


def _render_argument(segments: list[str], args: Sequence[Any]) -> FormatResult:
    raw_index, raw_type, raw_style = segments
    if not _INDEX.fullmatch(raw_index):
        return FormatResult.failure(f"can't parse argument number: {raw_index}")
    index = int(raw_index)
    if index < 0:
        return FormatResult.failure(f"negative argument number: {index}")
    if index > _MAX_INDEX:
        return FormatResult.failure(f"argument number out of range: {raw_index}")

    format_type = raw_type.strip().lower()
    style = raw_style.strip().lower()
    if format_type in _UNSUPPORTED_TYPES:
        return FormatResult.failure(f"unsupported format type: {raw_type}")
    if format_type not in ("", _TYPE_NUMBER):
        return FormatResult.failure(f"unknown format type: {raw_type}")
    if format_type == _TYPE_NUMBER and style not in ("", "integer", "percent"):
        return FormatResult.failure(f"unsupported number style: {raw_style}")

    if index >= len(args):
        return FormatResult.success("{" + str(index) + "}")

    value = args[index]
    if value is None:
        return FormatResult.success("null")

    if _is_number(value):
        return FormatResult.success(format_number(value, style))
    if format_type == _TYPE_NUMBER:
        return FormatResult.failure("Cannot format given Object as a Number")
    return FormatResult.success(to_text(value))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def to_text(value: Any) -> str:
    """JVM-style string conversion of a single argument."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_number(value: int | float | Decimal, style: str = "") -> str:
    """`#,##0.###`, `#,##0` (integer) or `#,##0%` (percent), half-even."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "∞" if value > 0 else "-∞"
        number = Decimal(repr(value))
    else:
        number = Decimal(value)

    suffix = ""
    digits = 3
    if style == "percent":
        number *= 100
        digits = 0
        suffix = "%"
    elif style == "integer":
        digits = 0

    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() + digits + 2)
        ctx.rounding = ROUND_HALF_EVEN
        rounded = number.quantize(Decimal(1).scaleb(-digits))
        text = f"{rounded:,f}"

    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text + suffix
