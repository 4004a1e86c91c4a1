"""Process-wide settings for dbspine.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    Adapters never read ``os.environ`` themselves; they ask
    :func:`get_settings` for the row limit or connect timeout.

    - **Pydantic validation:** Type-checked at startup, not at query time
    - **Environment-driven:** ``DBSPINE_*`` variables and ``.env`` files
    - **Sensible defaults:** Works without any configuration

Examples:
    >>> from dbspine.core.settings import get_settings
    >>> get_settings().default_row_limit
    300

Tags:
    settings, configuration, pydantic, environment, dbspine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DbSpineSettings(BaseSettings):
    """dbspine configuration.

    Fields
    ──────
    url                : Default connection string for the CLI
    default_row_limit  : Page size used when ``get_records`` gets ``limit=0``
    connect_timeout    : Seconds passed to the engine driver on connect
    log_level          : Structlog log level
    log_json           : Force JSON (True) / console (False) logs; None = auto
    """

    model_config = SettingsConfigDict(
        env_prefix="DBSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Connection ───────────────────────────────────────────────
    url: str | None = Field(default=None, description="Default connection string")
    connect_timeout: int = Field(default=10, ge=1)

    # ── Records ──────────────────────────────────────────────────
    default_row_limit: int = Field(default=300, ge=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_json: bool | None = Field(default=None)


_settings_cache: dict[str, DbSpineSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DbSpineSettings:
    """Load, validate, and cache a :class:`DbSpineSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = DbSpineSettings()
    _settings_cache["default"] = settings
    return settings


__all__ = [
    "DbSpineSettings",
    "get_settings",
]
