"""Result-or-failure value passed between the message formatting stages."""

from typing import NamedTuple


class FormatResult(NamedTuple):
    text: str | None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.text is not None

    @classmethod
    def success(cls, text: str) -> "FormatResult":
        return cls(text)

    @classmethod
    def failure(cls, reason: str) -> "FormatResult":
        return cls(None, reason)
