"""Parsing helpers for sizes and identity hashes found in tracker markup."""

from __future__ import annotations

import re

_BTIH_RE = re.compile(r"btih:([a-fA-F0-9]{40})", re.IGNORECASE)

_SIZE_RE = re.compile(
    r"(\d+(?:[.,]\d+)?)\s*(TB|GB|MB|KB|B|ТБ|ГБ|МБ|КБ|Б)\b", re.IGNORECASE
)

# Cyrillic units as printed by rutor/rutracker/kinozal.
_UNIT_ALIASES = {"ТБ": "TB", "ГБ": "GB", "МБ": "MB", "КБ": "KB", "Б": "B"}

_MULTIPLIERS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}

_UNITS = ("B", "KB", "MB", "GB", "TB")


def parse_size_to_bytes(size_str: str | None) -> int:
    """Parse a human-readable size into bytes.

    Supports formats:
        - "1234" (raw bytes)
        - "4.5 GB", "4,5 GB"
        - "1.46 ГБ" (Cyrillic units)
        - "1.46\xa0GB" (non-breaking space, rutracker)

    Returns 0 when nothing parseable is found.
    """
    if not size_str:
        return 0

    text = size_str.replace("\xa0", " ").strip()
    if text.isdigit():
        return int(text)

    match = _SIZE_RE.search(text)
    if not match:
        return 0

    value = float(match.group(1).replace(",", "."))
    unit = match.group(2).upper()
    unit = _UNIT_ALIASES.get(unit, unit)
    return int(value * _MULTIPLIERS.get(unit, 1))


def format_bytes(size: int | None) -> str:
    """Render a byte count as ``"1.46 GB"``.

    ``0`` renders as ``"0 B"``, ``None`` or negative as ``"Unknown"``.
    """
    if size is None or size < 0:
        return "Unknown"
    if size == 0:
        return "0 B"
    value = float(size)
    idx = 0
    while value >= 1024 and idx < len(_UNITS) - 1:
        value /= 1024
        idx += 1
    return f"{value:.2f} {_UNITS[idx]}"


def extract_info_hash(magnet: str | None) -> str | None:
    """Pull the upper-cased 40-hex identity hash out of a magnet URI."""
    if not magnet:
        return None
    match = _BTIH_RE.search(magnet)
    return match.group(1).upper() if match else None
