"""
Tag and Custom Field Parsing
----------------------------
Both lists arrive as single comma-separated strings read once at startup.
Parsing happens while the FormatterConfig is built, so a bad value stops
initialization instead of silently losing a field.

  tags:    "foo,bar"            -> ("foo", "bar")
  fields:  "foo:bar,baz:foobar" -> (("foo", "bar"), ("baz", "foobar"))
"""

from logstash_formatter.core.errors import ErrorCode, FormatterError

DEFAULT_TAGS: tuple[str, ...] = ("UNKNOWN",)


def split_list(raw: str, separator: str = ",") -> list[str]:
    """
    Split the way the Logstash formatters always have: interior empty
    entries are kept, trailing empty entries are dropped, and a string
    without any separator is a single entry (even when it is empty).
    """
    if separator not in raw:
        return [raw]

    parts = raw.split(separator)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def parse_tags(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_TAGS
    return tuple(split_list(raw))


def parse_custom_fields(raw: str | None) -> tuple[tuple[str, str], ...]:
    """
    Raises FormatterError on the first token that has no ':'.
    Each token is split on its first ':' so values may contain colons.
    """
    if not raw:
        return ()

    fields: list[tuple[str, str]] = []
    for token in split_list(raw):
        if token == "":
            continue

        key, colon, value = token.partition(":")
        if not colon:
            raise FormatterError(
                ErrorCode.MALFORMED_CUSTOM_FIELD,
                f"Custom field {token!r} is not a 'key:value' pair.",
                internal=f"fields={raw!r}",
            )
        fields.append((key, value))

    return tuple(fields)
