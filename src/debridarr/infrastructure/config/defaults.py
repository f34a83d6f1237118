"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "debridarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "ttl_seconds": 3600,
        "max_entries": None,
    },
    "sources": {
        "timeout_seconds": 10.0,
        "jackett": {"url": None, "api_key": None, "timeout_seconds": 15.0},
        "rutor": {"enabled": True, "base_url": "http://rutor.info"},
        "rutracker": {"enabled": True, "base_url": "https://rutracker.org"},
        "kinozal": {"enabled": True, "base_url": "https://kinozal.tv"},
    },
    "resolver": {
        "max_candidates": 15,
        "max_concurrent": 3,
        "seeder_margin": 10,
    },
    "metadata": {
        "omdb_api_key": "trilogy",
        "timeout_seconds": 5.0,
    },
    "debrid": {
        "base_url": "https://api.real-debrid.com/rest/1.0",
        "timeout_seconds": 10.0,
    },
}
