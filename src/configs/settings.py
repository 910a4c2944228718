"""Environment overrides for tracker input loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings powered by pydantic-settings.

    Loads overrides from ``INPUTS_``-prefixed environment variables; unset
    values fall back to inputs.yaml.
    """

    DEFAULT_ENCODING: str | None = None
    LOG_LEVEL: str | None = None
    JSON_LOGS: bool | None = None

    model_config = SettingsConfigDict(
        env_prefix="INPUTS_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
