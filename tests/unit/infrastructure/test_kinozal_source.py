"""Tests for the kinozal.tv scraper."""

from __future__ import annotations

import httpx
import pytest
import respx

from debridarr.domain.entities import Resolution, SearchCriteria
from debridarr.infrastructure.sources.kinozal import KinozalSource

_BASE = "https://kinozal.test"
_SEARCH_URL = f"{_BASE}/browse.php"
_HASH = "89abcdef0123456789abcdef0123456789abcdef"

_SEARCH_PAGE = """
<html><body>
<table class="t_peer w100p">
<tr class="mn"><td>Название</td><td>Размер</td></tr>
<tr class="bg">
  <td class="bt"><img src="/pic/cat/17.gif"/></td>
  <td class="nam"><a href="/details.php?id=1001" class="r1">Дюна / Dune / 2021 / BDRip (1080p)</a></td>
  <td class="s">12</td>
  <td class="s">14.5 ГБ</td>
  <td class="sl_s">30</td>
  <td class="sl_p">2</td>
  <td class="s">сегодня в 10:00</td>
</tr>
<tr class="bg">
  <td class="bt"></td>
  <td class="nam"><a href="/details.php">Row without id</a></td>
  <td class="s">1 ГБ</td>
</tr>
</table>
</body></html>
"""

_DETAIL_FRAGMENT = f"""
<ul>
<li>Инфо хеш: {_HASH}</li>
<li>Размер: 14.5 ГБ</li>
</ul>
"""

_CRITERIA = SearchCriteria(kind="movie", title="Dune", year=2021)


def _source(**kwargs: object) -> KinozalSource:
    params = {"base_url": _BASE, "client": httpx.AsyncClient()}
    params.update(kwargs)
    return KinozalSource(**params)


class TestParseRows:
    def test_parses_row(self) -> None:
        rows = _source().parse_rows(_SEARCH_PAGE)

        assert len(rows) == 1
        row = rows[0]
        assert row.topic_id == "1001"
        assert row.title == "Дюна / Dune / 2021 / BDRip (1080p)"
        assert row.size == "14.5 ГБ"
        assert row.seeders == 30

    def test_extract_hash(self) -> None:
        assert _source().extract_hash(_DETAIL_FRAGMENT) == _HASH.upper()

    def test_extract_hash_missing(self) -> None:
        assert _source().extract_hash("<ul><li>Размер: 1 ГБ</li></ul>") is None


class TestKinozalSearch:
    def test_display_name(self) -> None:
        assert _source().display_name == "Kinozal"

    @respx.mock
    @pytest.mark.asyncio
    async def test_with_cookie_resolves_hash(self) -> None:
        search = respx.get(url__startswith=_SEARCH_URL).respond(
            200, content=_SEARCH_PAGE.encode("cp1251")
        )
        detail = respx.get(f"{_BASE}/get_srv_details.php?id=1001&action=2").respond(
            200, content=_DETAIL_FRAGMENT.encode("cp1251")
        )

        result = await _source(cookie="uid=1; pass=x").search(_CRITERIA)

        assert len(result) == 1
        candidate = result[0]
        assert candidate.info_hash == _HASH.upper()
        assert candidate.source == "Kinozal"
        assert candidate.size == "14.5 ГБ"
        assert candidate.seeders == 30
        assert candidate.quality.resolution == Resolution.HD_1080P
        assert search.calls.last.request.url.params["s"] == "Dune 2021"
        assert detail.calls.last.request.headers["Cookie"] == "uid=1; pass=x"

    @respx.mock
    @pytest.mark.asyncio
    async def test_without_cookie_search_page_not_fetched(self) -> None:
        search = respx.get(url__startswith=_SEARCH_URL).respond(
            200, content=_SEARCH_PAGE.encode("cp1251")
        )

        source = _source()

        assert source.enabled is False
        assert await source.search(_CRITERIA) == []
        assert not search.called
