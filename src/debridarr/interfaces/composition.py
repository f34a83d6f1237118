"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from debridarr.application.aggregator import SourceAggregator
from debridarr.application.availability import AvailabilityResolver
from debridarr.application.use_cases import ResolveStreamsUseCase
from debridarr.domain.ports import TorrentSourcePort
from debridarr.infrastructure.config.schema import AppConfig
from debridarr.infrastructure.debrid.realdebrid import RealDebridClient
from debridarr.infrastructure.metadata.omdb import OmdbMetadataClient
from debridarr.infrastructure.persistence.stream_cache import (
    MemoryStreamCache,
    stream_cache_key,
)
from debridarr.infrastructure.sources import (
    JackettSource,
    KinozalSource,
    RutorSource,
    RutrackerSource,
)
from debridarr.infrastructure.stremio.candidate_ranker import CandidateRanker
from debridarr.infrastructure.stremio.episode_matcher import find_episode_file
from debridarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_sources(
    config: AppConfig, http_client: httpx.AsyncClient
) -> list[TorrentSourcePort]:
    """Instantiate every source adapter from config (disabled ones included)."""
    src = config.sources
    return [
        JackettSource(
            url=src.jackett.url,
            api_key=src.jackett.api_key,
            client=http_client,
            timeout=src.jackett.timeout_seconds,
        ),
        RutorSource(
            base_url=src.rutor.base_url,
            enabled=src.rutor.enabled,
            client=http_client,
            timeout=src.timeout_seconds,
        ),
        RutrackerSource(
            base_url=src.rutracker.base_url,
            enabled=src.rutracker.enabled,
            cookie=src.rutracker.cookie,
            detail_limit=src.rutracker.detail_limit,
            client=http_client,
            timeout=src.timeout_seconds,
        ),
        KinozalSource(
            base_url=src.kinozal.base_url,
            enabled=src.kinozal.enabled,
            cookie=src.kinozal.cookie,
            detail_limit=src.kinozal.detail_limit,
            client=http_client,
            timeout=src.timeout_seconds,
        ),
    ]


def build_use_case(
    config: AppConfig,
    http_client: httpx.AsyncClient,
    sources: list[TorrentSourcePort],
    cache: MemoryStreamCache,
) -> ResolveStreamsUseCase:
    return ResolveStreamsUseCase(
        metadata=OmdbMetadataClient(
            api_key=config.metadata.omdb_api_key,
            http_client=http_client,
            base_url=config.metadata.base_url,
            timeout=config.metadata.timeout_seconds,
        ),
        aggregator=SourceAggregator(
            sources,
            timeout_seconds=config.sources.timeout_seconds,
            timeout_overrides={"jackett": config.sources.jackett.timeout_seconds},
        ),
        ranker=CandidateRanker(seeder_margin=config.resolver.seeder_margin),
        resolver=AvailabilityResolver(
            RealDebridClient(
                http_client=http_client,
                base_url=config.debrid.base_url,
                timeout=config.debrid.timeout_seconds,
            ),
            episode_finder=find_episode_file,
            max_candidates=config.resolver.max_candidates,
            max_concurrent=config.resolver.max_concurrent,
        ),
        cache=cache,
        cache_key_fn=stream_cache_key,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create shared resources on startup, close them on shutdown."""
    state = cast(AppState, app.state)
    config = state.config

    # 1) Shared HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Result cache (per process)
    state.stream_cache = MemoryStreamCache(
        config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
    )
    log.info(
        "stream_cache_initialized",
        ttl_seconds=config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
    )

    # 3) Sources
    state.sources = build_sources(config, state.http_client)
    log.info(
        "sources_initialized",
        enabled=[s.name for s in state.sources if s.enabled],
        disabled=[s.name for s in state.sources if not s.enabled],
    )

    # 4) Use case
    state.resolve_streams_uc = build_use_case(
        config, state.http_client, state.sources, state.stream_cache
    )
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")
        log.info("app_shutdown_complete")
