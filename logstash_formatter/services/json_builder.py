"""
Ordered JSON Object Builder
---------------------------
Key order in the encoded event is part of the wire contract, so the encoder
adds members one by one through this builder instead of assembling a dict
literal. Re-adding a key replaces its value in place, keeping the original
position.

Output is compact (no whitespace) and keeps non-ASCII text as UTF-8.
"""

import json
from typing import Any, Iterable

_SEPARATORS = (",", ":")


class JsonObjectBuilder:
    def __init__(self) -> None:
        self._members: dict[str, Any] = {}

    def add(self, key: str, value: str | int | bool | None) -> "JsonObjectBuilder":
        self._members[key] = value
        return self

    def add_array(self, key: str, values: Iterable[str]) -> "JsonObjectBuilder":
        self._members[key] = list(values)
        return self

    def add_object(self, key: str, builder: "JsonObjectBuilder") -> "JsonObjectBuilder":
        self._members[key] = builder._members
        return self

    def keys(self) -> list[str]:
        return list(self._members)

    def build(self) -> str:
        return json.dumps(self._members, ensure_ascii=False, separators=_SEPARATORS)
