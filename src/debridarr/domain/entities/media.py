"""Domain entities describing what is being searched for.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

MediaKind = Literal["movie", "series"]


@dataclass(frozen=True)
class TitleInfo:
    """Title and release year from the metadata lookup."""

    title: str
    year: int | None = None


@dataclass(frozen=True)
class SearchCriteria:
    """Immutable search input, built once per resolution request."""

    kind: MediaKind
    title: str
    year: int | None = None
    season: int | None = None
    episode: int | None = None
    media_id: str = ""  # IMDb ID, e.g. "tt1234567"

    @property
    def is_episodic(self) -> bool:
        return self.kind == "series"

    def search_query(self) -> str:
        """Build the free-text query sent to sources.

        ``"Title 2020"`` for movies, ``"Title 2020 S01E02"`` for episodes.
        """
        parts = [self.title.strip()] if self.title.strip() else []
        if self.year:
            parts.append(str(self.year))
        if self.is_episodic and self.season is not None:
            marker = f"S{self.season:02d}"
            if self.episode is not None:
                marker += f"E{self.episode:02d}"
            parts.append(marker)
        return " ".join(parts)


@dataclass(frozen=True)
class StreamRequest:
    """Parsed host request.

    Created from ``tt1234567`` (movie) or ``tt1234567:1:5``
    (series, season 1, episode 5) plus the requester's debrid key.
    """

    kind: MediaKind
    media_id: str
    season: int | None = None
    episode: int | None = None
    credential: str | None = None

    @property
    def cache_id(self) -> str:
        """Media id including season/episode, e.g. ``tt1234567:1:5``."""
        if self.season is not None and self.episode is not None:
            return f"{self.media_id}:{self.season}:{self.episode}"
        return self.media_id
