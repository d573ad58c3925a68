"""Estimator settings.

Configuration is explicit, validated, and environment-driven. Every field
can be set through an ``ESTIMATOR_``-prefixed environment variable or a
``.env`` file in the working directory.

Fields
──────
catalog_path       : Directory of ``catalog-<timestamp>.json`` snapshots
instructions_path  : Optional markdown file served by ``get_instructions``
reload_on_request  : Re-read the latest snapshot on every MCP tool call
log_level          : Structlog log level
log_format         : ``console`` or ``json``
host / port        : Bind address for the streamable-http MCP transport

Examples:
    >>> import os
    >>> os.environ["ESTIMATOR_CATALOG_PATH"] = "/srv/catalogs"
    >>> get_settings(_force_reload=True).catalog_path
    PosixPath('/srv/catalogs')

Tags:
    settings, configuration, pydantic, environment, env-prefix
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EstimatorSettings(BaseSettings):
    """Settings shared by the CLI and the MCP server."""

    model_config = SettingsConfigDict(
        env_prefix="ESTIMATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Catalog ──────────────────────────────────────────────────
    catalog_path: Path = Field(
        default_factory=lambda: Path.cwd() / "data" / "catalogs",
        description="Directory holding versioned catalog snapshots",
    )
    instructions_path: Path | None = Field(
        default=None,
        description="Markdown guidance returned by get_instructions (packaged default if unset)",
    )
    reload_on_request: bool = True

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8100

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return value


_settings_cache: dict[str, EstimatorSettings] = {}


def get_settings(*, _force_reload: bool = False) -> EstimatorSettings:
    """Load, validate, and cache an :class:`EstimatorSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = EstimatorSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (tests, config reload)."""
    _settings_cache.clear()
