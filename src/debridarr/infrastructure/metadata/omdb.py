"""OMDb title lookup."""

from __future__ import annotations

import re

import httpx
import structlog

from debridarr.domain.entities import MediaKind, TitleInfo

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://www.omdbapi.com/"

_YEAR_RE = re.compile(r"\d{4}")


class OmdbMetadataClient:
    """Async OMDb client. Implements ``MetadataPort`` from domain.ports.metadata.

    Best effort: every failure degrades to an empty ``TitleInfo``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url
        self._timeout = timeout

    async def lookup(self, media_id: str, kind: MediaKind) -> TitleInfo:
        params = {
            "i": media_id,
            "apikey": self._api_key,
            "type": "series" if kind == "series" else "movie",
        }
        try:
            resp = await self._http.get(
                self._base_url, params=params, timeout=self._timeout
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError:
            log.warning("omdb_request_failed", media_id=media_id, exc_info=True)
            return TitleInfo(title="")
        except ValueError:
            log.warning("omdb_invalid_json", media_id=media_id)
            return TitleInfo(title="")

        if not isinstance(data, dict) or data.get("Response") != "True":
            log.info(
                "omdb_title_not_found",
                media_id=media_id,
                error=data.get("Error") if isinstance(data, dict) else None,
            )
            return TitleInfo(title="")

        year_match = _YEAR_RE.search(str(data.get("Year") or ""))
        return TitleInfo(
            title=str(data.get("Title") or ""),
            year=int(year_match.group(0)) if year_match else None,
        )
