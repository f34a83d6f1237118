"""Release-title quality extraction.

Keyword tables are matched case-insensitively on token boundaries
(``ts`` does not fire inside ``Artists``). Resolution and source keywords
also match when glued to digits (``BDRip1080p``). The first keyword group that
matches wins per field; fields are evaluated independently. When no
resolution keyword matches, guessit's ``screen_size`` is consulted.
"""

from __future__ import annotations

import re

import structlog
from guessit import guessit

from debridarr.domain.entities import Codec, QualityDescriptor, Resolution, SourceType

log = structlog.get_logger(__name__)


def _token(keyword: str, *, glued: bool = False) -> str:
    if not glued:
        return rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])"
    # Tracker tags glue digits to keywords ("BDRip1080p"); only letters
    # on either side break the token.
    left = r"(?<!\d)" if keyword[0].isdigit() else r"(?<![a-z0-9])"
    return rf"{left}{re.escape(keyword)}(?![a-z])"


def _table(
    rows: list[tuple[tuple[str, ...], object]], *, glued: bool = False
) -> list[tuple[re.Pattern[str], object]]:
    return [
        (re.compile("|".join(_token(k, glued=glued) for k in keywords)), value)
        for keywords, value in rows
    ]


_RESOLUTION_RULES = _table(
    [
        (("2160p", "4k", "uhd"), Resolution.UHD_4K),
        (("1080p",), Resolution.HD_1080P),
        (("720p",), Resolution.HD_720P),
        (("480p",), Resolution.SD_480P),
    ],
    glued=True,
)

_SOURCE_RULES = _table(
    [
        (("remux", "bdremux"), SourceType.REMUX),
        (("bluray", "blu-ray", "bdrip", "bd-rip", "brrip"), SourceType.BLURAY),
        (("web-dlrip", "webdlrip", "web-dl", "webdl"), SourceType.WEB_DL),
        (("webrip",), SourceType.WEBRIP),
        (("hdtv", "hdtvrip"), SourceType.HDTV),
        (("dvdrip",), SourceType.DVDRIP),
        (("cam", "camrip", "hdcam"), SourceType.CAM),
        (("ts", "telesync", "hdts"), SourceType.TS),
    ],
    glued=True,
)

_CODEC_RULES = _table(
    [
        (("hevc", "h265", "h.265", "x265"), Codec.HEVC),
        (("h264", "h.264", "x264", "avc"), Codec.H264),
        (("av1",), Codec.AV1),
    ]
)

_AUDIO_RULES = _table(
    [
        (("atmos",), "Dolby Atmos"),
        (("truehd",), "TrueHD"),
        (("dts-hd", "dts-ma"), "DTS-HD"),
        (("dts",), "DTS"),
        (("dd5.1", "ac3"), "DD 5.1"),
        (("aac",), "AAC"),
    ]
)

_HDR_RE = re.compile(
    "|".join(
        _token(k) for k in ("hdr10+", "hdr10", "hdr", "dolby vision", "dovi", "dv")
    )
)

_SCREEN_SIZE_TO_RESOLUTION: dict[str, Resolution] = {
    "2160p": Resolution.UHD_4K,
    "4320p": Resolution.UHD_4K,
    "1080p": Resolution.HD_1080P,
    "1080i": Resolution.HD_1080P,
    "720p": Resolution.HD_720P,
    "480p": Resolution.SD_480P,
    "576p": Resolution.SD_480P,
    "360p": Resolution.SD_480P,
}

# Higher wins. A descriptor's priority is the larger of its resolution
# entry and its source-type entry.
_RESOLUTION_PRIORITY: dict[Resolution, int] = {
    Resolution.UHD_4K: 100,
    Resolution.HD_1080P: 80,
    Resolution.HD_720P: 60,
    Resolution.SD_480P: 40,
    Resolution.UNKNOWN: 0,
}

_SOURCE_PRIORITY: dict[SourceType, int] = {
    SourceType.REMUX: 95,
    SourceType.BLURAY: 70,
    SourceType.WEB_DL: 65,
    SourceType.WEBRIP: 60,
    SourceType.HDTV: 50,
}


def _first_match(text: str, rules: list[tuple[re.Pattern[str], object]], default):
    for pattern, value in rules:
        if pattern.search(text):
            return value
    return default


def _resolution_from_guessit(title: str) -> Resolution:
    try:
        screen_size = guessit(title).get("screen_size")
    except Exception:  # noqa: BLE001
        log.debug("guessit_failed", title=title)
        return Resolution.UNKNOWN
    if isinstance(screen_size, str):
        return _SCREEN_SIZE_TO_RESOLUTION.get(screen_size, Resolution.UNKNOWN)
    return Resolution.UNKNOWN


def parse_quality(title: str | None) -> QualityDescriptor:
    """Derive a QualityDescriptor from a release title. Never raises."""
    if not title:
        return QualityDescriptor()

    text = title.lower()
    resolution = _first_match(text, _RESOLUTION_RULES, Resolution.UNKNOWN)
    if resolution is Resolution.UNKNOWN:
        resolution = _resolution_from_guessit(title)

    return QualityDescriptor(
        resolution=resolution,
        source=_first_match(text, _SOURCE_RULES, SourceType.UNKNOWN),
        codec=_first_match(text, _CODEC_RULES, Codec.UNKNOWN),
        audio=_first_match(text, _AUDIO_RULES, None),
        hdr=bool(_HDR_RE.search(text)),
    )


def quality_priority(quality: QualityDescriptor) -> int:
    """Numeric ranking weight of a descriptor (0 when nothing is known)."""
    return max(
        _RESOLUTION_PRIORITY.get(quality.resolution, 0),
        _SOURCE_PRIORITY.get(quality.source, 0),
    )
