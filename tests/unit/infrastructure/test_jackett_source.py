"""Tests for the Jackett indexer source."""

from __future__ import annotations

import httpx
import pytest
import respx

from debridarr.domain.entities import Resolution, SearchCriteria, SourceType
from debridarr.infrastructure.sources.jackett import JackettSource

_URL = "http://jackett.test"
_RESULTS_URL = f"{_URL}/api/v2.0/indexers/all/results"
_HASH = "0123456789abcdef0123456789abcdef01234567"

_CRITERIA = SearchCriteria(kind="movie", title="Dune", year=2021, media_id="tt1160419")


def _source(**kwargs: object) -> JackettSource:
    params = {"url": _URL, "api_key": "secret", "client": httpx.AsyncClient()}
    params.update(kwargs)
    return JackettSource(**params)


class TestJackettSource:
    def test_identity(self) -> None:
        source = _source()
        assert source.name == "jackett"
        assert source.kind == "indexer"
        assert source.display_name == "Jackett"

    @pytest.mark.parametrize(
        ("url", "api_key"), [(None, "secret"), (_URL, None), ("", "")]
    )
    def test_disabled_without_url_or_key(
        self, url: str | None, api_key: str | None
    ) -> None:
        assert _source(url=url, api_key=api_key).enabled is False

    @pytest.mark.asyncio
    async def test_disabled_source_makes_no_request(self) -> None:
        with respx.mock:
            result = await _source(url=None).search(_CRITERIA)
            assert respx.calls.call_count == 0
        assert result == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_float_seeders(self) -> None:
        respx.get(url__startswith=_RESULTS_URL).respond(
            200,
            json={
                "Results": [
                    {
                        "Title": "Dune.2021.1080p.WEB-DL",
                        "MagnetUri": f"magnet:?xt=urn:btih:{_HASH}",
                        "Seeders": 12.0,
                        "Size": 1073741824.0,
                    }
                ]
            },
        )

        (candidate,) = await _source().search(_CRITERIA)

        assert candidate.seeders == 12
        assert candidate.size == "1.00 GB"

    @respx.mock
    @pytest.mark.asyncio
    async def test_parses_results(self) -> None:
        route = respx.get(url__startswith=_RESULTS_URL).respond(
            200,
            json={
                "Results": [
                    {
                        "Title": "Dune.2021.2160p.WEB-DL.HEVC",
                        "MagnetUri": f"magnet:?xt=urn:btih:{_HASH}&dn=Dune",
                        "Seeders": 50,
                        "Size": 1073741824,
                        "Tracker": "1337x",
                    },
                    {
                        "Title": "Dune.2021.720p.BluRay",
                        "MagnetUri": None,
                        "InfoHash": "b" * 40,
                        "Seeders": "7",
                        "Size": None,
                        "Tracker": None,
                    },
                    {"Title": "No hash at all", "MagnetUri": None, "InfoHash": None},
                    "garbage",
                ]
            },
        )

        result = await _source().search(_CRITERIA)

        assert len(result) == 2
        first, second = result
        assert first.info_hash == _HASH.upper()
        assert first.source == "1337x"
        assert first.seeders == 50
        assert first.size == "1.00 GB"
        assert first.quality.resolution == Resolution.UHD_4K
        assert first.magnet is not None
        assert second.info_hash == "B" * 40
        assert second.source == "Jackett"
        assert second.seeders == 7
        assert second.size == ""
        assert second.quality.source == SourceType.BLURAY

        params = route.calls.last.request.url.params
        assert params["apikey"] == "secret"
        assert params["Query"] == "Dune 2021"
        assert params["imdbid"] == "1160419"

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_imdb_id_not_sent(self) -> None:
        route = respx.get(url__startswith=_RESULTS_URL).respond(
            200, json={"Results": []}
        )
        criteria = SearchCriteria(kind="movie", title="Dune", media_id="kitsu:1")

        assert await _source().search(criteria) == []
        assert "imdbid" not in route.calls.last.request.url.params

    @respx.mock
    @pytest.mark.asyncio
    async def test_http_error_returns_empty(self) -> None:
        respx.get(url__startswith=_RESULTS_URL).respond(500)
        assert await _source().search(_CRITERIA) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self) -> None:
        respx.get(url__startswith=_RESULTS_URL).mock(
            side_effect=httpx.ReadTimeout("slow")
        )
        assert await _source().search(_CRITERIA) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_invalid_json_returns_empty(self) -> None:
        respx.get(url__startswith=_RESULTS_URL).respond(200, text="<html>nope</html>")
        assert await _source().search(_CRITERIA) == []
