"""Env var config loading with pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PRESETS_PATH = Path(__file__).parent / "presets.yaml"


class CSPSettings(BaseSettings):
    """cspheader configuration, overridden by CSP_* env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CSP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Preset used when none is named explicitly
    preset: str = "strict"
    presets_file: str = str(_PRESETS_PATH)
    log_level: str = "info"
    log_json: bool = True


_settings: CSPSettings | None = None


def get_settings() -> CSPSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings() -> CSPSettings:
    """Load settings from env vars (env vars override model defaults)."""
    global _settings
    _settings = CSPSettings()
    return _settings
