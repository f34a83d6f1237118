"""Resolve a stream request end to end.

Flow:
    1. Refuse early when the requester has no debrid API key.
    2. Serve from the per-account result cache when possible.
    3. Look up title and year (best effort).
    4. Discover candidates (indexers first, trackers as fallback).
    5. Dedupe and rank.
    6. Keep only candidates cached at the debrid provider.
    7. Cache non-empty results.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

import structlog

from debridarr.domain.entities import (
    Candidate,
    SearchCriteria,
    Stream,
    StreamRequest,
    StreamResolution,
    TitleInfo,
)
from debridarr.domain.ports import MetadataPort, StreamCachePort

log = structlog.get_logger(__name__)


class _Aggregator(Protocol):
    async def search(self, criteria: SearchCriteria) -> list[Candidate]: ...


class _Ranker(Protocol):
    def process(self, candidates: list[Candidate]) -> list[Candidate]: ...


class _Resolver(Protocol):
    async def resolve(
        self,
        candidates: list[Candidate],
        credential: str,
        criteria: SearchCriteria,
    ) -> list[Stream]: ...


_CacheKeyFn = Callable[[str, str], str]


class ResolveStreamsUseCase:
    """Produce the playable streams for one movie or episode.

    Never raises: unexpected failures are logged and reported as an
    empty resolution.
    """

    def __init__(
        self,
        *,
        metadata: MetadataPort,
        aggregator: _Aggregator,
        ranker: _Ranker,
        resolver: _Resolver,
        cache: StreamCachePort,
        cache_key_fn: _CacheKeyFn,
    ) -> None:
        self._metadata = metadata
        self._aggregator = aggregator
        self._ranker = ranker
        self._resolver = resolver
        self._cache = cache
        self._cache_key = cache_key_fn

    async def execute(self, request: StreamRequest) -> StreamResolution:
        if not request.credential:
            log.info("stream_request_missing_credential", media_id=request.media_id)
            return StreamResolution.missing_credential()

        with structlog.contextvars.bound_contextvars(media_id=request.cache_id):
            try:
                return await self._execute(request, request.credential)
            except Exception:
                log.exception("stream_resolution_failed")
                return StreamResolution.empty()

    async def _execute(self, request: StreamRequest, credential: str) -> StreamResolution:
        cache_key = self._cache_key(request.cache_id, credential)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            log.info("stream_cache_hit", stream_count=len(cached))
            return StreamResolution(streams=tuple(cached), from_cache=True)

        title_info = await self._lookup_title(request)
        criteria = SearchCriteria(
            kind=request.kind,
            title=title_info.title,
            year=title_info.year,
            season=request.season,
            episode=request.episode,
            media_id=request.media_id,
        )
        query = criteria.search_query()
        log.info("stream_search_start", query=query, kind=request.kind)

        candidates = await self._aggregator.search(criteria)
        if not candidates:
            log.info("stream_search_no_results", query=query)
            return StreamResolution.empty()

        ranked = self._ranker.process(candidates)
        streams = await self._resolver.resolve(ranked, credential, criteria)

        if streams:
            await self._cache.set(cache_key, streams)

        log.info(
            "stream_search_complete",
            query=query,
            candidate_count=len(candidates),
            unique_count=len(ranked),
            stream_count=len(streams),
        )
        return StreamResolution(streams=tuple(streams))

    async def _lookup_title(self, request: StreamRequest) -> TitleInfo:
        try:
            info = await self._metadata.lookup(request.media_id, request.kind)
        except Exception:
            log.warning("metadata_lookup_failed", exc_info=True)
            info = TitleInfo(title="")
        if not info.title:
            # Sources still run: Jackett can match on the imdbid hint alone.
            log.warning("metadata_title_missing")
        return info
