"""Candidate deduplication and ranking.

Ordering rule: a seeder difference larger than ``seeder_margin`` decides
(more seeders first); within the margin the higher quality priority wins.
The comparator is not a strict weak ordering over all inputs, so the
result is only defined up to Python's stable merge sort over the input
order, which keeps ties in discovery order.
"""

from __future__ import annotations

import functools

import structlog

from debridarr.domain.entities import Candidate
from debridarr.infrastructure.stremio.quality_parser import quality_priority

log = structlog.get_logger(__name__)

DEFAULT_SEEDER_MARGIN = 10


def deduplicate(candidates: list[Candidate]) -> list[Candidate]:
    """Drop repeated identity hashes, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[Candidate] = []
    for candidate in candidates:
        key = candidate.info_hash.upper()
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


def _compare(margin: int, a: Candidate, b: Candidate) -> int:
    seed_diff = b.seeders - a.seeders
    if abs(seed_diff) > margin:
        return seed_diff
    return quality_priority(b.quality) - quality_priority(a.quality)


def rank(
    candidates: list[Candidate], *, seeder_margin: int = DEFAULT_SEEDER_MARGIN
) -> list[Candidate]:
    """Return a new list ordered best-first."""
    key = functools.cmp_to_key(functools.partial(_compare, seeder_margin))
    return sorted(candidates, key=key)


class CandidateRanker:
    """Dedupe then rank. Stateless apart from the seeder margin."""

    def __init__(self, seeder_margin: int = DEFAULT_SEEDER_MARGIN) -> None:
        self._seeder_margin = seeder_margin

    def process(self, candidates: list[Candidate]) -> list[Candidate]:
        unique = deduplicate(candidates)
        ranked = rank(unique, seeder_margin=self._seeder_margin)
        log.debug(
            "candidates_ranked",
            received=len(candidates),
            unique=len(unique),
        )
        return ranked
