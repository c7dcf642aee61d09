"""Preset policies loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from cspheader.config.loader import get_settings
from cspheader.models.options import Policy

logger = structlog.get_logger()

# Cache loaded presets
_presets: dict[str, dict] | None = None


def _load_presets() -> dict[str, dict]:
    """Load preset definitions from YAML, caching after first load."""
    global _presets
    if _presets is not None:
        return _presets
    path = Path(get_settings().presets_file)
    if not path.exists():
        logger.error("presets_not_found", path=str(path))
        _presets = {}
        return _presets
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of preset names to policies")
    _presets = data
    logger.debug("presets_loaded", path=str(path), presets=sorted(_presets))
    return _presets


def reset_presets_cache() -> None:
    """Reset the presets cache (for testing)."""
    global _presets
    _presets = None


def available_presets() -> list[str]:
    return sorted(_load_presets())


def load_preset(name: str | None = None) -> Policy:
    """Build a fresh Policy from the named preset (default: settings.preset)."""
    name = name or get_settings().preset
    presets = _load_presets()
    if name not in presets:
        raise KeyError(f"Unknown preset: {name}")
    return Policy.model_validate(presets[name] or {})


def react_policy() -> Policy:
    """Policy generally agreeable for React applications."""
    return load_preset("react")


def strict_policy() -> Policy:
    """Nonce-ready strict policy; set script_src.nonce_value per response."""
    return load_preset("strict")
