"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from debridarr.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from debridarr.application.use_cases import ResolveStreamsUseCase
    from debridarr.domain.ports import StreamCachePort, TorrentSourcePort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    stream_cache: StreamCachePort
    sources: list[TorrentSourcePort]

    # Application Services
    resolve_streams_uc: ResolveStreamsUseCase
