"""Locate the episode file inside a multi-file torrent."""

from __future__ import annotations

import re
from collections.abc import Sequence

VIDEO_EXTENSIONS: tuple[str, ...] = (
    ".mkv",
    ".mp4",
    ".avi",
    ".mov",
    ".wmv",
    ".m4v",
    ".mpg",
    ".mpeg",
    ".webm",
)


def is_video_file(name: str) -> bool:
    return name.lower().endswith(VIDEO_EXTENSIONS)


def _episode_patterns(season: int, episode: int) -> list[re.Pattern[str]]:
    s, e = int(season), int(episode)
    return [
        # S01E05, s1e5
        re.compile(rf"s0*{s}e0*{e}(?!\d)", re.IGNORECASE),
        # 1x05
        re.compile(rf"(?<!\d)0*{s}x0*{e}(?!\d)", re.IGNORECASE),
        # Season 1 Episode 5
        re.compile(rf"season\s*0*{s}(?!\d).*?episode\s*0*{e}(?!\d)", re.IGNORECASE),
        # Сезон 1 Серия 5
        re.compile(rf"сезон\s*0*{s}(?!\d).*?серия\s*0*{e}(?!\d)", re.IGNORECASE),
    ]


def find_episode_file(
    names: Sequence[str], season: int | None, episode: int | None
) -> int | None:
    """Pick the file for *season*/*episode* from a torrent's file list.

    Only video files are considered. The first file whose name carries a
    matching episode marker wins; otherwise the first video file is
    returned as fallback.

    Returns:
        1-based index into *names*, or None when there is no video file.
    """
    videos = [(idx, name) for idx, name in enumerate(names, start=1) if is_video_file(name)]
    if not videos:
        return None

    if season is not None and episode is not None:
        patterns = _episode_patterns(season, episode)
        for idx, name in videos:
            if any(p.search(name) for p in patterns):
                return idx

    return videos[0][0]
