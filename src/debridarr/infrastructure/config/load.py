from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from debridarr.domain.exceptions import ConfigError

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTION_KEYS: set[str] = {
    "http",
    "logging",
    "cache",
    "sources",
    "resolver",
    "metadata",
    "debrid",
}

# Flat key (ENV / CLI) -> path in the sectioned shape.
_FLAT_MAP: dict[str, tuple[str, ...]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_ttl_seconds": ("cache", "ttl_seconds"),
    "cache_max_entries": ("cache", "max_entries"),
    "sources_timeout_seconds": ("sources", "timeout_seconds"),
    "jackett_url": ("sources", "jackett", "url"),
    "jackett_api_key": ("sources", "jackett", "api_key"),
    "rutor_enabled": ("sources", "rutor", "enabled"),
    "rutracker_enabled": ("sources", "rutracker", "enabled"),
    "rutracker_cookie": ("sources", "rutracker", "cookie"),
    "kinozal_enabled": ("sources", "kinozal", "enabled"),
    "kinozal_cookie": ("sources", "kinozal", "cookie"),
    "resolver_max_candidates": ("resolver", "max_candidates"),
    "resolver_max_concurrent": ("resolver", "max_concurrent"),
    "omdb_api_key": ("metadata", "omdb_api_key"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge `override` into `base` and return `base`.

    Rules:
    - dict + dict => deep merge
    - otherwise => override wins
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a layer (defaults/YAML/ENV/CLI) into the canonical *sectioned* shape.

    Sectioned blocks pass through; flat keys listed in ``_FLAT_MAP`` are
    moved to their section path. Unknown keys are dropped.
    """
    out: dict[str, Any] = {}

    for section in _SECTION_KEYS:
        if section not in data:
            continue
        block = data[section]
        if not isinstance(block, Mapping):
            raise ConfigError(f"Config section '{section}' must be a mapping")
        out[section] = deepcopy(dict(block))

    for key in ("app_name", "environment"):
        if key in data:
            out[key] = data[key]

    for flat_key, path in _FLAT_MAP.items():
        if flat_key not in data:
            continue
        node = out
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    raw = config_path.read_text(encoding="utf-8")
    parsed = yaml.safe_load(raw)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars < cli overrides

    This function MUST NOT create files or directories (no filesystem side-effects).
    """
    cli_overrides = cli_overrides or {}

    # Load .env first so it participates as "env vars" layer.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    base = _normalize_layer(deepcopy(DEFAULT_CONFIG))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        _deep_merge(base, _normalize_layer(_read_yaml_config(config_path)))

    _deep_merge(base, _normalize_layer(EnvOverrides().to_update_dict()))
    _deep_merge(base, _normalize_layer(cli_overrides))

    # Validate final merged config (single source of truth).
    return AppConfig.model_validate(base)
