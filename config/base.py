from __future__ import annotations

from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Settings shared by every environment. Subclasses pick the env file and defaults."""

    DATABASE_URL: str | None = None
    APP_ENV: str = "local"
    SECRET_KEY: str | None = None
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Status catalog
    DEFAULT_STATUS_COLOR: str = "#adb5bd"

    # When true, confirming an audit also writes its asserted status into the asset.
    AUDIT_CONFIRM_APPLIES_STATUS: bool = False

    AUDIT_PAGE_LIMIT_MAX: int = 200
