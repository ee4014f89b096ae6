"""
Printf-style Substitution
-------------------------
Renders `%s`-style templates with the grammar and checks of the JVM's
java.util.Formatter, the other convention Logstash log calls use:

    %[index$][flags][width][.precision]conversion

Supported conversions: s S b B h H c C d o x X e E f g G % n.
Extra arguments are ignored. A specifier that the JVM would reject (unknown
conversion, a flag that does not apply, a missing width or argument, an
argument of the wrong type) makes the whole substitution fail; nothing is
ever partially rendered.

Floating point values are rounded half-up on their shortest decimal
representation, as the JVM does.
"""

import re
import struct
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, NamedTuple, Sequence

from logstash_formatter.services.positional import to_text
from logstash_formatter.services.result import FormatResult

_SPECIFIER = re.compile(r"%(\d+\$)?([-#+ 0,(<]*)?(\d+)?(\.\d+)?([tT])?([a-zA-Z%])")

_GENERAL = "bhs"
_CHARACTER = "c"
_INTEGRAL = "dox"
_KNOWN = frozenset("bBhHsScCdoxXeEfgG%n")

_INT32 = 1 << 32
_INT64 = 1 << 64


class _Spec(NamedTuple):
    index: int | None       # explicit 1-based index
    flags: str
    width: int | None
    precision: int | None
    conversion: str         # lower-case conversion character
    upper: bool


def format_printf(pattern: str, args: Sequence[Any]) -> FormatResult:
    out: list[str] = []
    ordinary = 0
    last = -1
    i = 0

    while i < len(pattern):
        pct = pattern.find("%", i)
        if pct < 0:
            out.append(pattern[i:])
            break
        out.append(pattern[i:pct])

        match = _SPECIFIER.match(pattern, pct)
        if match is None:
            return FormatResult.failure(
                f"Unknown format conversion after '%' at {pct}"
            )
        i = match.end()

        spec, error = _parse(match)
        if spec is None:
            return FormatResult.failure(error)

        if spec.conversion == "%":
            out.append(_justify("%", spec))
            continue
        if spec.conversion == "n":
            out.append("\n")
            continue

        if "<" in spec.flags:
            index = last
        elif spec.index is not None:
            index = spec.index - 1
        else:
            index = ordinary
            ordinary += 1
        if index < 0 or index >= len(args):
            return FormatResult.failure(f"Format specifier '{match.group(0)}' has no argument")
        last = index

        rendered = _render(spec, args[index])
        if not rendered.ok:
            return rendered
        out.append(rendered.text)

    return FormatResult.success("".join(out))


# ── Parsing & flag checks ─────────────────────────────────────────────────────

def _parse(match: re.Match) -> tuple[_Spec | None, str]:
    raw_index, flags, raw_width, raw_precision, date_prefix, conversion = match.groups()
    flags = flags or ""

    if date_prefix:
        return None, f"Unsupported date/time conversion '{date_prefix}{conversion}'"
    if conversion not in _KNOWN:
        return None, f"Unknown format conversion '{conversion}'"
    if len(set(flags)) != len(flags):
        return None, f"Duplicate flags '{flags}'"

    index = None
    if raw_index:
        index = int(raw_index[:-1])
        if index == 0:
            return None, "Illegal format argument index 0"

    width = int(raw_width) if raw_width else None
    precision = int(raw_precision[1:]) if raw_precision else None

    spec = _Spec(index, flags, width, precision, conversion.lower(), conversion.isupper())
    error = _check(spec)
    if error:
        return None, error
    return spec, ""


def _check(spec: _Spec) -> str:
    conv, flags = spec.conversion, spec.flags
    missing_width = spec.width is None and ("-" in flags or "0" in flags)

    if conv == "n":
        if spec.precision is not None or spec.width is not None or flags:
            return "Illegal flags, width or precision for %n"
        return ""

    if conv == "%":
        if spec.precision is not None:
            return "Illegal precision for %%"
        if flags not in ("", "-"):
            return f"Illegal flags '{flags}' for %%"
        if missing_width:
            return "Missing width for %%"
        return ""

    if conv in _GENERAL or conv in _CHARACTER:
        if conv in _CHARACTER and spec.precision is not None:
            return "Illegal precision for %c"
        if "#" in flags:
            return f"Flag '#' does not apply to %{conv}"
        bad = set(flags) & set("+ 0,(")
        if bad:
            return f"Flags '{''.join(sorted(bad))}' do not apply to %{conv}"
        if missing_width:
            return f"Missing width for %{conv}"
        return ""

    # numeric
    if conv in _INTEGRAL and spec.precision is not None:
        return f"Illegal precision for %{conv}"
    if missing_width:
        return f"Missing width for %{conv}"
    if "+" in flags and " " in flags:
        return "Flags '+' and ' ' are exclusive"
    if "-" in flags and "0" in flags:
        return "Flags '-' and '0' are exclusive"
    if conv == "d" and "#" in flags:
        return "Flag '#' does not apply to %d"
    if conv in "ox":
        bad = set(flags) & set("+ ,(")
        if bad:
            return f"Flags '{''.join(sorted(bad))}' do not apply to %{conv}"
    if conv == "e" and "," in flags:
        return "Flag ',' does not apply to %e"
    if conv == "g" and "#" in flags:
        return "Flag '#' does not apply to %g"
    return ""


# ── Rendering ─────────────────────────────────────────────────────────────────

def _render(spec: _Spec, value: Any) -> FormatResult:
    conv = spec.conversion

    if value is None:
        text = "false" if conv == "b" else "null"
        if conv in _GENERAL and spec.precision is not None:
            text = text[:spec.precision]
        return FormatResult.success(_justify(_case(text, spec), spec))

    if conv in _GENERAL:
        if conv == "b":
            text = to_text(value) if isinstance(value, bool) else "true"
        elif conv == "h":
            text = format(hash_code(value), "x")
        else:
            text = to_text(value)
        if spec.precision is not None:
            text = text[:spec.precision]
        return FormatResult.success(_justify(_case(text, spec), spec))

    if conv in _CHARACTER:
        if isinstance(value, str) and len(value) == 1:
            text = value
        elif _is_integer(value) and 0 <= value <= 0x10FFFF:
            text = chr(value)
        else:
            return FormatResult.failure(f"%c can't format {type(value).__name__}")
        return FormatResult.success(_justify(_case(text, spec), spec))

    if conv in _INTEGRAL:
        if not _is_integer(value):
            return FormatResult.failure(f"%{conv} can't format {type(value).__name__}")
        return FormatResult.success(_integral(spec, value))

    if not _is_real(value):
        return FormatResult.failure(f"%{conv} can't format {type(value).__name__}")
    return FormatResult.success(_floating(spec, value))


def hash_code(value: Any) -> int:
    """
    The JVM hashCode of the value as an unsigned 32-bit int, the same in
    every process. Values with no JVM counterpart hash their text form.
    """
    if isinstance(value, bool):
        return 1231 if value else 1237
    if isinstance(value, int) and -_INT32 // 2 <= value < _INT32 // 2:
        return value & 0xFFFFFFFF
    if isinstance(value, int) and -_INT64 // 2 <= value < _INT64 // 2:
        return _fold(value & (_INT64 - 1))
    if isinstance(value, float):
        if value != value:
            return _fold(0x7FF8000000000000)
        return _fold(struct.unpack(">Q", struct.pack(">d", value))[0])

    text = value if isinstance(value, str) else to_text(value)
    units = text.encode("utf-16-be", "surrogatepass")
    h = 0
    for i in range(0, len(units), 2):
        h = (31 * h + (units[i] << 8 | units[i + 1])) & 0xFFFFFFFF
    return h


def _fold(bits: int) -> int:
    return (bits ^ (bits >> 32)) & 0xFFFFFFFF


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _case(text: str, spec: _Spec) -> str:
    return text.upper() if spec.upper else text


def _justify(text: str, spec: _Spec) -> str:
    if spec.width is None or len(text) >= spec.width:
        return text
    if "-" in spec.flags:
        return text.ljust(spec.width)
    return text.rjust(spec.width)


def _signed(spec: _Spec, magnitude: str, negative: bool) -> str:
    """Apply sign flags, zero padding and justification to a magnitude."""
    flags = spec.flags
    if negative:
        lead = "(" if "(" in flags else "-"
        trail = ")" if "(" in flags else ""
    else:
        lead = "+" if "+" in flags else " " if " " in flags else ""
        trail = ""

    if "0" in flags and spec.width is not None:
        magnitude = magnitude.rjust(spec.width - len(lead) - len(trail), "0")

    return _justify(_case(lead + magnitude + trail, spec), spec)


def _integral(spec: _Spec, value: int) -> str:
    if spec.conversion == "d":
        magnitude = f"{abs(value):,}" if "," in spec.flags else str(abs(value))
        return _signed(spec, magnitude, value < 0)

    # octal and hex print the two's complement of negative int/long values
    if value < 0:
        if value >= -(_INT32 >> 1):
            value += _INT32
        elif value >= -(_INT64 >> 1):
            value += _INT64

    prefix = ""
    if "#" in spec.flags:
        prefix = "0" if spec.conversion == "o" else "0x"
    sign = "-" if value < 0 else ""
    digits = format(abs(value), spec.conversion)
    if "0" in spec.flags and spec.width is not None:
        digits = digits.rjust(spec.width - len(prefix) - len(sign), "0")
    return _justify(_case(sign + prefix + digits, spec), spec)


def _floating(spec: _Spec, value: int | float | Decimal) -> str:
    number = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    negative = number.is_signed()

    if not number.is_finite():
        if number.is_nan():
            return _justify(_case("NaN", spec), spec)
        if negative:
            text = "(Infinity)" if "(" in spec.flags else "-Infinity"
        else:
            text = "+Infinity" if "+" in spec.flags else " Infinity" if " " in spec.flags else "Infinity"
        return _justify(_case(text, spec), spec)

    magnitude = number.copy_abs()
    group = "," in spec.flags

    precision = 6 if spec.precision is None else spec.precision
    if spec.conversion == "f":
        body = _fixed(magnitude, precision, group)
        if "#" in spec.flags and precision == 0:
            body += "."
    elif spec.conversion == "e":
        body = _scientific(magnitude, precision)
    else:
        body = _general(magnitude, precision or 1, group)

    return _signed(spec, body, negative)


def _quantize(number: Decimal, places: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() + places + 2)
        return number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _fixed(magnitude: Decimal, places: int, group: bool) -> str:
    rounded = _quantize(magnitude, places)
    return f"{rounded:,f}" if group else f"{rounded:f}"


def _round_significant(magnitude: Decimal, digits: int) -> tuple[Decimal, int]:
    """Mantissa in [1, 10) rounded to `digits` significant digits, and its exponent."""
    if magnitude.is_zero():
        return _quantize(Decimal(0), digits - 1), 0

    exponent = magnitude.adjusted()
    mantissa = _quantize(magnitude.scaleb(-exponent), digits - 1)
    if mantissa >= 10:
        exponent += 1
        mantissa = _quantize(magnitude.scaleb(-exponent), digits - 1)
    return mantissa, exponent


def _scientific(magnitude: Decimal, places: int) -> str:
    mantissa, exponent = _round_significant(magnitude, places + 1)
    sign = "-" if exponent < 0 else "+"
    return f"{mantissa:f}e{sign}{abs(exponent):02d}"


def _general(magnitude: Decimal, precision: int, group: bool) -> str:
    if magnitude.is_zero():
        return _fixed(magnitude, precision - 1, group)

    mantissa, exponent = _round_significant(magnitude, precision)
    if -4 <= exponent < precision:
        return _fixed(magnitude, precision - exponent - 1, group)
    return _scientific(magnitude, precision - 1)
