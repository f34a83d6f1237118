"""rutor.info scraper.

Public tracker, no login. Search result rows carry the magnet link
directly, so every row yields a real identity hash.

Row layout (``#index tr``, first row is the header)::

    <td>date</td>
    <td><a class="downgif" href="/download/..."/>
        <a href="magnet:?xt=urn:btih:HASH"/>
        <a href="/torrent/ID/...">Title</a></td>
    [<td>comments</td>]
    <td>1.46 GB</td>
    <td><span class="green">12</span> <span class="red">3</span></td>
"""

from __future__ import annotations

from urllib.parse import quote

from bs4 import Tag

from debridarr.domain.entities import Candidate, SearchCriteria
from debridarr.infrastructure.common.converters import to_int
from debridarr.infrastructure.common.html_selectors import (
    extract_text,
    parse_html,
    select_items,
)
from debridarr.infrastructure.common.parsers import extract_info_hash
from debridarr.infrastructure.stremio.quality_parser import parse_quality

from .httpx_base import HttpxSourceBase


class RutorSource(HttpxSourceBase):
    name = "rutor"
    kind = "tracker"
    _encoding = "utf-8"

    async def _search(self, criteria: SearchCriteria) -> list[Candidate]:
        query = criteria.search_query()
        if not query:
            return []

        url = f"{self.base_url}/search/0/0/000/0/{quote(query)}"
        html = await self._fetch_required_html(url, context="search")

        candidates = self.parse_results(html)
        self._log.info(
            "rutor_search_complete", query=query, results_count=len(candidates)
        )
        return candidates

    def parse_results(self, html: str) -> list[Candidate]:
        soup = parse_html(html)
        rows = select_items(soup, "#index tr")
        candidates: list[Candidate] = []
        for row in rows[1:]:
            candidate = self._parse_row(row)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def _parse_row(self, row: Tag) -> Candidate | None:
        cells = row.find_all("td", recursive=False)
        if len(cells) < 4:
            return None

        links = cells[1].find_all("a")
        if not links:
            return None

        magnet = next(
            (
                str(a["href"])
                for a in links
                if str(a.get("href", "")).startswith("magnet:")
            ),
            None,
        )
        title = links[-1].get_text(" ", strip=True)

        return self._candidate(
            info_hash=extract_info_hash(magnet),
            title=title,
            seeders=to_int(extract_text(row, "span.green")),
            size=cells[-2].get_text(" ", strip=True).replace("\xa0", " "),
            quality=parse_quality(title),
            source="Rutor",
            magnet=magnet,
        )
