"""Debrid availability resolution for ranked candidates."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol

import structlog

from debridarr.domain.entities import Candidate, SearchCriteria, Stream
from debridarr.domain.exceptions import DebridProviderError
from debridarr.domain.ports import DebridProviderPort

log = structlog.get_logger(__name__)

DEFAULT_MAX_CANDIDATES = 15
DEFAULT_MAX_CONCURRENT = 3


class _EpisodeFinder(Protocol):
    def __call__(
        self, names: Sequence[str], season: int | None, episode: int | None
    ) -> int | None: ...


class AvailabilityResolver:
    """Turn the top ranked candidates into playable streams.

    Only candidates the debrid provider reports as cached become streams.
    Output keeps rank order regardless of which provider call returns
    first.
    """

    def __init__(
        self,
        debrid: DebridProviderPort,
        *,
        episode_finder: _EpisodeFinder,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        provider_name: str = "RD",
    ) -> None:
        self._debrid = debrid
        self._find_episode_file = episode_finder
        self._max_candidates = max_candidates
        self._max_concurrent = max_concurrent
        self._provider_name = provider_name

    async def resolve(
        self,
        candidates: list[Candidate],
        credential: str,
        criteria: SearchCriteria,
    ) -> list[Stream]:
        top = candidates[: self._max_candidates]
        if not top:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _resolve_one(candidate: Candidate) -> Stream | None:
            async with semaphore:
                return await self._resolve_candidate(candidate, credential, criteria)

        resolved = await asyncio.gather(*(_resolve_one(c) for c in top))
        streams = [s for s in resolved if s is not None]

        log.info(
            "availability_resolved",
            checked=len(top),
            available=len(streams),
        )
        return streams

    async def _resolve_candidate(
        self,
        candidate: Candidate,
        credential: str,
        criteria: SearchCriteria,
    ) -> Stream | None:
        try:
            info = await self._debrid.check_availability(candidate.info_hash, credential)
        except DebridProviderError as exc:
            log.warning(
                "availability_check_failed",
                info_hash=candidate.info_hash,
                error=str(exc),
            )
            return None
        except Exception:
            log.warning(
                "availability_check_failed",
                info_hash=candidate.info_hash,
                exc_info=True,
            )
            return None

        if not info.available:
            return None

        file_idx: int | None = None
        if criteria.is_episodic:
            file_idx = self._find_episode_file(
                info.file_names, criteria.season, criteria.episode
            )
            if file_idx is None:
                log.info(
                    "episode_file_not_found",
                    info_hash=candidate.info_hash,
                    files=len(info.files),
                )
                return None

        return Stream(
            name=f"{self._provider_name} {candidate.source}",
            title=candidate.title,
            info_hash=candidate.info_hash,
            file_idx=file_idx,
            size=candidate.size,
            quality=candidate.quality,
            seeders=candidate.seeders,
            source=candidate.source,
        )
