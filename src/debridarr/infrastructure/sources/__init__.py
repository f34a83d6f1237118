"""Torrent discovery adapters."""

from __future__ import annotations

from .httpx_base import HttpxSourceBase
from .jackett import JackettSource
from .kinozal import KinozalSource
from .rutor import RutorSource
from .rutracker import RutrackerSource

__all__ = [
    "HttpxSourceBase",
    "JackettSource",
    "KinozalSource",
    "RutorSource",
    "RutrackerSource",
]
