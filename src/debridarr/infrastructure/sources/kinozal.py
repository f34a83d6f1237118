"""kinozal.tv scraper (windows-1251, login required for hashes).

The hash is read from the ``get_srv_details.php?action=2`` fragment
("Инфо хеш: ..."), which is much smaller than the full topic page.
"""

from __future__ import annotations

import re

from bs4 import Tag

from debridarr.infrastructure.common.converters import to_int
from debridarr.infrastructure.common.html_selectors import (
    extract_text,
    parse_html,
    select_items,
)
from debridarr.infrastructure.common.parsers import parse_size_to_bytes

from .gated import GatedTrackerSource, TopicRow

_TOPIC_ID_RE = re.compile(r"[?&]id=(\d+)")
_INFO_HASH_RE = re.compile(r"Инфо\s+хеш\s*:?\s*([0-9A-Fa-f]{40})", re.IGNORECASE)


class KinozalSource(GatedTrackerSource):
    name = "kinozal"
    _encoding = "windows-1251"

    def _search_url(self, query: str) -> tuple[str, dict[str, str]]:
        return f"{self.base_url}/browse.php", {"s": query}

    def _detail_url(self, topic_id: str) -> str:
        return f"{self.base_url}/get_srv_details.php?id={topic_id}&action=2"

    def parse_rows(self, html: str) -> list[TopicRow]:
        soup = parse_html(html)
        rows: list[TopicRow] = []
        for row in select_items(soup, "table.t_peer tr.bg", ".t_peer tr.bg"):
            parsed = self._parse_row(row)
            if parsed is not None:
                rows.append(parsed)
        return rows

    def _parse_row(self, row: Tag) -> TopicRow | None:
        link = row.select_one("td.nam a")
        if link is None:
            return None
        title = link.get_text(" ", strip=True)
        match = _TOPIC_ID_RE.search(str(link.get("href", "")))
        if not title or match is None:
            return None

        # td.s cells hold comments count, size and date; size is the one
        # carrying a unit.
        size = ""
        for cell in row.select("td.s"):
            text = cell.get_text(" ", strip=True)
            if not text.isdigit() and parse_size_to_bytes(text):
                size = text
                break

        return TopicRow(
            topic_id=match.group(1),
            title=title,
            size=size,
            seeders=to_int(extract_text(row, "td.sl_s")),
        )

    def extract_hash(self, html: str) -> str | None:
        text = parse_html(html).get_text(" ", strip=True)
        match = _INFO_HASH_RE.search(text)
        return match.group(1).upper() if match else None
