"""
Error Contract
--------------
All domain errors are typed. Each maps to a deterministic HTTP status code
(used by the preview service) and a stable `error_code` string callers can
rely on.

Only configuration problems ever surface as errors. Message formatting and
host-name failures are recovered where they happen and never reach here.
"""

from enum import Enum


class ErrorCode(str, Enum):
    # Configuration errors → fatal at construction
    MALFORMED_CUSTOM_FIELD = "malformed_custom_field"
    UNKNOWN_TIMEZONE = "unknown_timezone"

    # Preview service input errors → 422
    INVALID_EVENT = "invalid_event"

    # Catch-all
    INTERNAL_ERROR = "internal_error"


# Maps ErrorCode → suggested HTTP status code
ERROR_STATUS_MAP: dict[ErrorCode, int] = {
    ErrorCode.MALFORMED_CUSTOM_FIELD: 500,
    ErrorCode.UNKNOWN_TIMEZONE:       500,
    ErrorCode.INVALID_EVENT:          422,
    ErrorCode.INTERNAL_ERROR:         500,
}


class FormatterError(Exception):
    """Base exception for all domain errors in this package."""

    def __init__(self, code: ErrorCode, detail: str = "", *, internal: str = ""):
        self.code = code
        self.detail = detail or code.value.replace("_", " ").capitalize()
        self.internal = internal  # logged server-side only, never returned to caller
        super().__init__(self.detail)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_MAP.get(self.code, 500)

    def to_response(self) -> dict:
        return {
            "error": self.code.value,
            "detail": self.detail,
        }
