"""Shared test fixtures for the debridarr test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from debridarr.domain.entities import Candidate, SearchCriteria
from factories import make_candidate

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_criteria() -> SearchCriteria:
    return SearchCriteria(kind="movie", title="Dune", year=2021, media_id="tt1160419")


@pytest.fixture()
def episode_criteria() -> SearchCriteria:
    return SearchCriteria(
        kind="series",
        title="Breaking Bad",
        year=2008,
        season=1,
        episode=5,
        media_id="tt0903747",
    )


@pytest.fixture()
def candidate() -> Candidate:
    return make_candidate()


# ---------------------------------------------------------------------------
# Port mocks
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_stream_cache() -> AsyncMock:
    """Async StreamCachePort mock that always misses."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    return cache


@pytest.fixture()
def mock_debrid() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def mock_metadata() -> AsyncMock:
    return AsyncMock()
