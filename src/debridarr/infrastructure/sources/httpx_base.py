"""Shared base class for httpx-based torrent sources.

Covers client lifecycle, fail-soft fetching, charset-aware HTML
decoding and detail-page concurrency. Sources that inherit from
``HttpxSourceBase`` structurally satisfy ``TorrentSourcePort``.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import structlog

from debridarr.domain.entities import Candidate, QualityDescriptor, SearchCriteria
from debridarr.domain.exceptions import SourceUnavailableError
from debridarr.domain.ports import SourceKind

from .constants import (
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_USER_AGENT,
)


class HttpxSourceBase:
    """Shared base for httpx-based sources.

    Subclasses **must** set ``name`` and ``kind`` and override ``_search()``.

    Subclasses **may** override:
    - ``_encoding`` (charset of the tracker's HTML)
    - ``_max_concurrent`` (parallel detail-page fetches)
    """

    name: str = ""
    kind: SourceKind = "tracker"

    _encoding: str = "utf-8"
    _max_concurrent: int = DEFAULT_MAX_CONCURRENT

    def __init__(
        self,
        *,
        base_url: str = "",
        enabled: bool = True,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._enabled = enabled
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._user_agent = user_agent
        self._log = structlog.get_logger(self.name or __name__)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Return the shared client, or lazily create an own one."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
            )
            self._owns_client = True
        return self._client

    async def cleanup(self) -> None:
        """Close the client if this source created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    async def _safe_fetch(
        self,
        url: str,
        *,
        context: str = "",
        **kwargs: object,
    ) -> httpx.Response | None:
        """GET *url* with structured error logging.

        Returns ``None`` on failure instead of raising.
        """
        client = await self._ensure_client()
        kwargs.setdefault("timeout", self._timeout)
        try:
            resp = await client.get(url, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.TimeoutException:
            self._log.warning(f"{self.name}_timeout", url=url, context=context)
        except httpx.HTTPStatusError as exc:
            self._log.warning(
                f"{self.name}_http_error",
                url=url,
                status=exc.response.status_code,
                context=context,
            )
        except httpx.HTTPError as exc:
            self._log.warning(
                f"{self.name}_fetch_error",
                url=url,
                error=str(exc),
                context=context,
            )
        return None

    async def _fetch_html(
        self,
        url: str,
        *,
        context: str = "",
        **kwargs: object,
    ) -> str | None:
        """Fetch a page and decode it with the tracker's charset."""
        resp = await self._safe_fetch(url, context=context, **kwargs)
        if resp is None:
            return None
        return resp.content.decode(self._encoding, errors="replace")

    async def _fetch_required_html(
        self,
        url: str,
        *,
        context: str = "",
        **kwargs: object,
    ) -> str:
        """Like ``_fetch_html``, but a failed fetch raises SourceUnavailableError."""
        html = await self._fetch_html(url, context=context, **kwargs)
        if html is None:
            raise SourceUnavailableError(
                self.name, f"{context or 'request'} failed: {url}"
            )
        return html

    def _safe_parse_json(
        self,
        response: httpx.Response,
        context: str = "",
    ) -> dict | list | None:
        """Parse JSON response with structured error logging."""
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            self._log.warning(
                f"{self.name}_invalid_json",
                url=str(response.url),
                context=context,
            )
            return None

    def _new_semaphore(self) -> asyncio.Semaphore:
        """Create a bounded semaphore for concurrent detail scraping."""
        return asyncio.Semaphore(self._max_concurrent)

    def _candidate(
        self,
        *,
        info_hash: str | None,
        title: str,
        seeders: int,
        size: str,
        quality: QualityDescriptor,
        source: str | None = None,
        magnet: str | None = None,
    ) -> Candidate | None:
        """Build a Candidate, or None when the hash is missing or malformed."""
        if not info_hash or not title:
            return None
        try:
            return Candidate(
                info_hash=info_hash,
                title=title,
                source=source or self.display_name,
                seeders=seeders,
                size=size,
                quality=quality,
                magnet=magnet,
            )
        except ValueError:
            self._log.debug(f"{self.name}_invalid_hash", info_hash=info_hash)
            return None

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(self, criteria: SearchCriteria) -> list[Candidate]:
        """Search the source and return normalized candidates.

        A ``SourceUnavailableError`` raised by ``_search()`` is recovered
        here and reduces to ``[]``.
        """
        try:
            return await self._search(criteria)
        except SourceUnavailableError as exc:
            self._log.info(f"{self.name}_unavailable", error=str(exc))
            return []

    async def _search(self, criteria: SearchCriteria) -> list[Candidate]:
        """Subclasses **must** override this method."""
        raise NotImplementedError(f"{type(self).__name__}._search() not implemented")
