"""Jackett aggregated indexer API.

``GET {url}/api/v2.0/indexers/all/results`` queries every indexer
configured in the Jackett instance and returns JSON hits with magnet
URIs, which makes it the preferred (first-phase) source.
"""

from __future__ import annotations

import httpx

from debridarr.domain.entities import Candidate, SearchCriteria
from debridarr.domain.exceptions import SourceUnavailableError
from debridarr.infrastructure.common.converters import to_int
from debridarr.infrastructure.common.parsers import extract_info_hash, format_bytes
from debridarr.infrastructure.stremio.quality_parser import parse_quality

from .constants import JACKETT_TIMEOUT
from .httpx_base import HttpxSourceBase


class JackettSource(HttpxSourceBase):
    """Structured indexer backed by a Jackett server."""

    name = "jackett"
    kind = "indexer"

    def __init__(
        self,
        *,
        url: str | None,
        api_key: str | None,
        client: httpx.AsyncClient | None = None,
        timeout: float = JACKETT_TIMEOUT,
    ) -> None:
        super().__init__(
            base_url=url or "",
            enabled=bool(url and api_key),
            client=client,
            timeout=timeout,
        )
        self._api_key = api_key or ""

    @property
    def display_name(self) -> str:
        return "Jackett"

    async def _search(self, criteria: SearchCriteria) -> list[Candidate]:
        if not self.enabled:
            return []

        query = criteria.search_query()
        params: dict[str, str] = {"apikey": self._api_key, "Query": query}
        imdb_numeric = criteria.media_id.removeprefix("tt")
        if imdb_numeric.isdigit():
            params["imdbid"] = imdb_numeric

        resp = await self._safe_fetch(
            f"{self.base_url}/api/v2.0/indexers/all/results",
            params=params,
            context="search",
        )
        if resp is None:
            raise SourceUnavailableError(self.name, "search request failed")

        data = self._safe_parse_json(resp, context="search")
        if not isinstance(data, dict):
            raise SourceUnavailableError(self.name, "unexpected response body")

        candidates: list[Candidate] = []
        for hit in data.get("Results") or []:
            candidate = self._parse_hit(hit)
            if candidate is not None:
                candidates.append(candidate)

        self._log.info(
            "jackett_search_complete",
            query=query,
            hits=len(data.get("Results") or []),
            results_count=len(candidates),
        )
        return candidates

    def _parse_hit(self, hit: object) -> Candidate | None:
        if not isinstance(hit, dict):
            return None
        title = str(hit.get("Title") or "").strip()
        magnet = hit.get("MagnetUri") or None
        info_hash = extract_info_hash(magnet) or hit.get("InfoHash")
        size = hit.get("Size")
        return self._candidate(
            info_hash=info_hash,
            title=title,
            seeders=to_int(hit.get("Seeders")),
            size=format_bytes(int(size)) if isinstance(size, (int, float)) else "",
            quality=parse_quality(title),
            source=hit.get("Tracker") or "Jackett",
            magnet=magnet,
        )
