"""Real-Debrid instant availability client."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from debridarr.domain.entities import AvailabilityInfo, DebridFile
from debridarr.domain.exceptions import DebridAuthError, DebridProviderError

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.real-debrid.com/rest/1.0"


class RealDebridClient:
    """Async Real-Debrid client using httpx.

    Implements ``DebridProviderPort`` from domain.ports.debrid. The
    credential is passed per call since every requester brings their
    own API key.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def _get(self, path: str, credential: str) -> Any:
        """GET with bearer auth. Raises DebridProviderError on any failure."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(
                url,
                headers={"Authorization": f"Bearer {credential}"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise DebridProviderError(f"Real-Debrid request failed: {exc}") from exc

        if resp.status_code in (401, 403):
            log.error("realdebrid_auth_failed", status=resp.status_code)
            raise DebridAuthError(
                f"Real-Debrid rejected the API key (HTTP {resp.status_code})"
            )
        if resp.status_code >= 400:
            raise DebridProviderError(f"Real-Debrid returned HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as exc:
            raise DebridProviderError("Real-Debrid returned invalid JSON") from exc

    async def check_availability(
        self, info_hash: str, credential: str
    ) -> AvailabilityInfo:
        """Check whether *info_hash* is in the Real-Debrid cache."""
        data = await self._get(
            f"/torrents/instantAvailability/{info_hash}", credential
        )
        return self._parse_availability(data, info_hash)

    @staticmethod
    def _parse_availability(data: Any, info_hash: str) -> AvailabilityInfo:
        if not isinstance(data, dict):
            return AvailabilityInfo.unavailable()

        wanted = info_hash.upper()
        entry = next(
            (value for key, value in data.items() if str(key).upper() == wanted),
            None,
        )
        if not isinstance(entry, dict):
            return AvailabilityInfo.unavailable()

        variants = entry.get("rd")
        if not isinstance(variants, list) or not variants:
            return AvailabilityInfo.unavailable()

        first = variants[0]
        if not isinstance(first, dict) or not first:
            return AvailabilityInfo.unavailable()

        files = tuple(
            DebridFile(
                name=str(meta.get("filename", "")),
                size=int(meta.get("filesize") or 0),
            )
            for meta in first.values()
            if isinstance(meta, dict)
        )
        return AvailabilityInfo(available=True, files=files)
