"""Base for trackers that only reveal info hashes to logged-in sessions.

Search pages of rutracker and kinozal list topics without hashes. With a
session cookie configured, the topic detail pages are fetched (bounded
concurrency, at most ``detail_limit`` rows) and the real hash extracted.
Rows whose hash cannot be obtained are omitted and counted. Without a
cookie the source reports itself disabled and never fetches.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from debridarr.domain.entities import Candidate, SearchCriteria
from debridarr.infrastructure.stremio.quality_parser import parse_quality

from .constants import DEFAULT_CLIENT_TIMEOUT, DEFAULT_DETAIL_LIMIT
from .httpx_base import HttpxSourceBase


@dataclass(frozen=True)
class TopicRow:
    """One search-result row before hash resolution."""

    topic_id: str
    title: str
    size: str
    seeders: int


class GatedTrackerSource(HttpxSourceBase):
    """Search page scraper plus per-topic hash lookup.

    Subclasses implement ``_search_url``, ``parse_rows``, ``_detail_url``
    and ``extract_hash``.
    """

    kind = "tracker"

    def __init__(
        self,
        *,
        base_url: str,
        enabled: bool = True,
        cookie: str | None = None,
        detail_limit: int = DEFAULT_DETAIL_LIMIT,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
    ) -> None:
        super().__init__(
            base_url=base_url, enabled=enabled, client=client, timeout=timeout
        )
        self._cookie = cookie or None
        self._detail_limit = max(0, detail_limit)
        if enabled and self._cookie is None:
            self._log.warning(f"{self.name}_cookie_missing", disabled=True)

    @property
    def enabled(self) -> bool:
        """Without a session cookie no row can yield a hash."""
        return self._enabled and self._cookie is not None

    def _request_kwargs(self) -> dict[str, object]:
        if self._cookie:
            return {"headers": {"Cookie": self._cookie}}
        return {}

    def _search_url(self, query: str) -> tuple[str, dict[str, str]]:
        raise NotImplementedError

    def _detail_url(self, topic_id: str) -> str:
        raise NotImplementedError

    def parse_rows(self, html: str) -> list[TopicRow]:
        raise NotImplementedError

    def extract_hash(self, html: str) -> str | None:
        raise NotImplementedError

    async def _search(self, criteria: SearchCriteria) -> list[Candidate]:
        query = criteria.search_query()
        if not query or not self.enabled:
            return []

        url, params = self._search_url(query)
        html = await self._fetch_required_html(
            url, params=params, context="search", **self._request_kwargs()
        )

        rows = self.parse_rows(html)
        candidates = await self._resolve_rows(rows)

        unresolved = len(rows) - len(candidates)
        if unresolved:
            self._log.info(
                f"{self.name}_rows_unresolved",
                query=query,
                unresolved=unresolved,
            )
        self._log.info(
            f"{self.name}_search_complete",
            query=query,
            rows=len(rows),
            results_count=len(candidates),
        )
        return candidates

    async def _resolve_rows(self, rows: list[TopicRow]) -> list[Candidate]:
        if not rows:
            return []

        sem = self._new_semaphore()

        async def _resolve(row: TopicRow) -> Candidate | None:
            async with sem:
                html = await self._fetch_html(
                    self._detail_url(row.topic_id),
                    context="detail",
                    **self._request_kwargs(),
                )
            if html is None:
                return None
            return self._candidate(
                info_hash=self.extract_hash(html),
                title=row.title,
                seeders=row.seeders,
                size=row.size,
                quality=parse_quality(row.title),
            )

        resolved = await asyncio.gather(
            *(_resolve(row) for row in rows[: self._detail_limit])
        )
        return [c for c in resolved if c is not None]
