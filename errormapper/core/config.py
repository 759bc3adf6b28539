"""
Configuration for the error mapper.

Settings are read from the environment once and cached so the
environment-driven defaults of the mapper are evaluated in a single place.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["local", "development", "test", "staging", "production"]


class Settings(BaseSettings):
    """Error mapper configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    environment: Environment = Field(default="production", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    show_stack_trace: bool | None = Field(
        default=None,
        alias="ERROR_MAPPER_SHOW_STACK_TRACE",
        description="Force stack traces in error payloads on or off regardless of APP_ENV.",
    )
    show_unknown_error_message: bool | None = Field(
        default=None,
        alias="ERROR_MAPPER_SHOW_UNKNOWN_ERROR_MESSAGE",
        description="Force exposing messages of unknown errors on or off regardless of APP_ENV.",
    )

    _DEVELOPMENT_ENVIRONMENTS = frozenset({"local", "development"})

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        trimmed = value.strip().upper()
        if not trimmed:
            raise ValueError("LOG_LEVEL must not be empty.")
        return trimmed

    @property
    def is_development(self) -> bool:
        return self.environment in self._DEVELOPMENT_ENVIRONMENTS

    @property
    def is_test(self) -> bool:
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance so configuration is evaluated once."""
    return Settings()


__all__ = ["Environment", "Settings", "get_settings"]
