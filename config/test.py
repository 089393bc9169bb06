from __future__ import annotations

from pydantic_settings import SettingsConfigDict

from .base import AppSettings


class TestSettings(AppSettings):
    # Overridden per test by the fixtures; only needs to be a valid async URL at import.
    DATABASE_URL: str | None = "sqlite+aiosqlite:///:memory:"
    APP_ENV: str = "test"
    SECRET_KEY: str | None = "test-secret-key"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="TEST_")
