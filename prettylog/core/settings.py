from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .handler import HandlerOptions
from .logger import Logger, setup_logger_with
from .record import Level


class LoggingSettings(BaseSettings):
    """Logger configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: Level = Field(default=Level.INFO, alias="LOG_LEVEL")
    log_add_source: bool = Field(default=False, alias="LOG_ADD_SOURCE")
    log_colorize: bool = Field(default=False, alias="LOG_COLORIZE")
    log_pretty_print: bool = Field(default=False, alias="LOG_PRETTY_PRINT")

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)

    def to_handler_options(self) -> HandlerOptions:
        return HandlerOptions(
            level=self.log_level,
            add_source=self.log_add_source,
            colorize=self.log_colorize,
            pretty_print=self.log_pretty_print,
        )


@lru_cache()
def get_settings() -> LoggingSettings:
    return LoggingSettings()


def setup_logger_from_env() -> Logger:
    """Install the default logger configured from the environment."""
    return setup_logger_with(get_settings().to_handler_options())
