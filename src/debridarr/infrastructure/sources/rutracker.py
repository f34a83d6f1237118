"""rutracker.org scraper (windows-1251, login required for hashes)."""

from __future__ import annotations

import re

from bs4 import Tag

from debridarr.infrastructure.common.converters import to_int
from debridarr.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)
from debridarr.infrastructure.common.parsers import (
    extract_info_hash,
    format_bytes,
    parse_size_to_bytes,
)

from .gated import GatedTrackerSource, TopicRow

_TOPIC_ID_RE = re.compile(r"[?&]t=(\d+)")


class RutrackerSource(GatedTrackerSource):
    name = "rutracker"
    _encoding = "windows-1251"

    @property
    def display_name(self) -> str:
        return "RuTracker"

    def _search_url(self, query: str) -> tuple[str, dict[str, str]]:
        return f"{self.base_url}/forum/tracker.php", {"nm": query}

    def _detail_url(self, topic_id: str) -> str:
        return f"{self.base_url}/forum/viewtopic.php?t={topic_id}"

    def parse_rows(self, html: str) -> list[TopicRow]:
        soup = parse_html(html)
        rows: list[TopicRow] = []
        for row in select_items(soup, "tr.tCenter", "tr.hl-tr"):
            parsed = self._parse_row(row)
            if parsed is not None:
                rows.append(parsed)
        return rows

    def _parse_row(self, row: Tag) -> TopicRow | None:
        link = row.select_one(".t-title a")
        if link is None:
            return None
        title = link.get_text(" ", strip=True)

        match = _TOPIC_ID_RE.search(str(link.get("href", "")))
        topic_id = match.group(1) if match else extract_attr(link, "", "data-topic_id")
        if not title or not topic_id:
            return None

        return TopicRow(
            topic_id=topic_id,
            title=title,
            size=self._row_size(row),
            seeders=to_int(extract_text(row, "b.seedmed")),
        )

    @staticmethod
    def _row_size(row: Tag) -> str:
        cell = row.select_one("td.tor-size")
        if cell is None:
            return ""
        # data-ts_text holds the exact byte count
        raw_bytes = str(cell.get("data-ts_text", ""))
        if raw_bytes.isdigit():
            return format_bytes(int(raw_bytes))
        size = parse_size_to_bytes(cell.get_text(" ", strip=True))
        return format_bytes(size) if size else ""

    def extract_hash(self, html: str) -> str | None:
        soup = parse_html(html)
        return extract_info_hash(extract_attr(soup, "a.magnet-link", "href"))
