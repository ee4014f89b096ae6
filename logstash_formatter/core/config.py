"""
Configuration — loads all settings from environment variables.
All values have safe defaults for local dev.

Raw strings live on Settings. FormatterConfig is the parsed, immutable view
the encoder works from; it is built once and shared by every formatter.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from logstash_formatter.core.errors import ErrorCode, FormatterError
from logstash_formatter.services.fields import DEFAULT_TAGS, parse_custom_fields, parse_tags


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOGSTASH_FORMATTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Event content ─────────────────────────────────────────────────────────
    tags: str | None = None          # "foo,bar"; unset → ["UNKNOWN"]
    fields: str = ""                 # "key:value,key2:value2"
    timezone: str | None = None      # IANA name for @timestamp; unset → local zone

    # ── App ───────────────────────────────────────────────────────────────────
    log_level: str = "INFO"


class FormatterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    tags: tuple[str, ...] = DEFAULT_TAGS
    custom_fields: tuple[tuple[str, str], ...] = ()
    timezone: str | None = None

    @classmethod
    def from_strings(
        cls,
        tags: str | None = None,
        fields: str = "",
        timezone: str | None = None,
    ) -> "FormatterConfig":
        """Parse the raw configuration strings. Raises FormatterError."""
        if timezone is not None:
            _load_zone(timezone)
        return cls(
            tags=parse_tags(tags),
            custom_fields=parse_custom_fields(fields),
            timezone=timezone,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FormatterConfig":
        return cls.from_strings(settings.tags, settings.fields, settings.timezone)

    def zone(self) -> ZoneInfo | None:
        """None means the process' local zone."""
        return _load_zone(self.timezone) if self.timezone else None


@lru_cache(maxsize=None)
def _load_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise FormatterError(
            ErrorCode.UNKNOWN_TIMEZONE,
            f"Unknown time zone {name!r}.",
            internal=str(exc),
        ) from exc


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@lru_cache()
def get_formatter_config() -> FormatterConfig:
    return FormatterConfig.from_settings(get_settings())
