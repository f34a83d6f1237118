"""Type conversion utilities."""

from __future__ import annotations

import math
import re

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def to_int(raw: str | int | float | None, default: int = 0) -> int:
    """Convert tracker counters to int.

    Handles:
        - None → default
        - int → int (passthrough)
        - float → truncated int (NaN/inf → default)
        - "1,234" / "1 234" → 1234
        - "12.0" → 12, "-1" → -1
        - "" or no digits → default
    """
    if raw is None:
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else default

    text = re.sub(r"[,\s]", "", str(raw))
    match = _NUMBER_RE.search(text)
    if not match:
        return default
    return int(float(match.group(0)))
