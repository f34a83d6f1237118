"""Tests for ResolveStreamsUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from debridarr.application.use_cases import ResolveStreamsUseCase
from debridarr.domain.entities import SearchCriteria, StreamRequest, TitleInfo
from debridarr.infrastructure.persistence.stream_cache import (
    MemoryStreamCache,
    stream_cache_key,
)
from factories import HASH_A, HASH_B, make_candidate, make_stream

_MOVIE = StreamRequest(kind="movie", media_id="tt1160419", credential="rd-key")
_EPISODE = StreamRequest(
    kind="series", media_id="tt0903747", season=1, episode=5, credential="rd-key"
)


def _make_uc(
    *,
    metadata: AsyncMock | None = None,
    aggregator: AsyncMock | None = None,
    ranker: MagicMock | None = None,
    resolver: AsyncMock | None = None,
    cache: object | None = None,
) -> ResolveStreamsUseCase:
    if metadata is None:
        metadata = AsyncMock()
        metadata.lookup = AsyncMock(return_value=TitleInfo("Dune", 2021))
    if aggregator is None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[make_candidate(HASH_A)])
    if ranker is None:
        ranker = MagicMock()
        ranker.process = MagicMock(side_effect=lambda c: list(c))
    if resolver is None:
        resolver = AsyncMock()
        resolver.resolve = AsyncMock(return_value=[make_stream(HASH_A)])
    if cache is None:
        cache = MemoryStreamCache()
    return ResolveStreamsUseCase(
        metadata=metadata,
        aggregator=aggregator,
        ranker=ranker,
        resolver=resolver,
        cache=cache,
        cache_key_fn=stream_cache_key,
    )


class TestMissingCredential:
    @pytest.mark.asyncio
    async def test_no_credential_short_circuits(self) -> None:
        aggregator = AsyncMock()
        uc = _make_uc(aggregator=aggregator)

        result = await uc.execute(StreamRequest(kind="movie", media_id="tt1"))

        assert result.configuration_required is True
        assert result.streams == ()
        aggregator.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_credential(self) -> None:
        result = await _make_uc().execute(
            StreamRequest(kind="movie", media_id="tt1", credential="")
        )
        assert result.configuration_required is True


class TestPipeline:
    @pytest.mark.asyncio
    async def test_happy_path(self) -> None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(
            return_value=[make_candidate(HASH_A), make_candidate(HASH_B)]
        )
        resolver = AsyncMock()
        resolver.resolve = AsyncMock(return_value=[make_stream(HASH_A)])
        uc = _make_uc(aggregator=aggregator, resolver=resolver)

        result = await uc.execute(_MOVIE)

        assert [s.info_hash for s in result.streams] == [HASH_A]
        assert result.from_cache is False
        criteria: SearchCriteria = aggregator.search.await_args.args[0]
        assert criteria.search_query() == "Dune 2021"
        assert criteria.media_id == "tt1160419"
        ranked, credential, _ = resolver.resolve.await_args.args
        assert len(ranked) == 2
        assert credential == "rd-key"

    @pytest.mark.asyncio
    async def test_episode_criteria(self) -> None:
        metadata = AsyncMock()
        metadata.lookup = AsyncMock(return_value=TitleInfo("Breaking Bad", 2008))
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[make_candidate()])
        uc = _make_uc(metadata=metadata, aggregator=aggregator)

        await uc.execute(_EPISODE)

        metadata.lookup.assert_awaited_once_with("tt0903747", "series")
        criteria = aggregator.search.await_args.args[0]
        assert criteria.search_query() == "Breaking Bad 2008 S01E05"

    @pytest.mark.asyncio
    async def test_ranker_output_feeds_resolver(self) -> None:
        ranker = MagicMock()
        ranked = [make_candidate(HASH_B)]
        ranker.process = MagicMock(return_value=ranked)
        resolver = AsyncMock()
        resolver.resolve = AsyncMock(return_value=[])
        uc = _make_uc(ranker=ranker, resolver=resolver)

        await uc.execute(_MOVIE)

        assert resolver.resolve.await_args.args[0] is ranked

    @pytest.mark.asyncio
    async def test_no_candidates(self) -> None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[])
        resolver = AsyncMock()
        uc = _make_uc(aggregator=aggregator, resolver=resolver)

        result = await uc.execute(_MOVIE)

        assert result.streams == ()
        assert result.configuration_required is False
        resolver.resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_metadata_failure_degrades(self) -> None:
        metadata = AsyncMock()
        metadata.lookup = AsyncMock(side_effect=RuntimeError("omdb down"))
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[make_candidate()])
        uc = _make_uc(metadata=metadata, aggregator=aggregator)

        result = await uc.execute(_MOVIE)

        assert len(result.streams) == 1
        criteria = aggregator.search.await_args.args[0]
        assert criteria.title == ""
        assert criteria.media_id == "tt1160419"

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_empty(self) -> None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(side_effect=RuntimeError("boom"))
        uc = _make_uc(aggregator=aggregator)

        result = await uc.execute(_MOVIE)

        assert result.streams == ()
        assert result.configuration_required is False


class TestCaching:
    @pytest.mark.asyncio
    async def test_second_request_served_from_cache(self) -> None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[make_candidate()])
        uc = _make_uc(aggregator=aggregator)

        first = await uc.execute(_MOVIE)
        second = await uc.execute(_MOVIE)

        assert first.from_cache is False
        assert second.from_cache is True
        assert second.streams == first.streams
        assert aggregator.search.await_count == 1

    @pytest.mark.asyncio
    async def test_cache_scoped_per_credential(self) -> None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[make_candidate()])
        uc = _make_uc(aggregator=aggregator)

        await uc.execute(_MOVIE)
        other = StreamRequest(kind="movie", media_id="tt1160419", credential="other")
        result = await uc.execute(other)

        assert result.from_cache is False
        assert aggregator.search.await_count == 2

    @pytest.mark.asyncio
    async def test_cache_scoped_per_episode(self) -> None:
        aggregator = AsyncMock()
        aggregator.search = AsyncMock(return_value=[make_candidate()])
        uc = _make_uc(aggregator=aggregator)

        await uc.execute(_EPISODE)
        next_episode = StreamRequest(
            kind="series", media_id="tt0903747", season=1, episode=6, credential="rd-key"
        )
        result = await uc.execute(next_episode)

        assert result.from_cache is False

    @pytest.mark.asyncio
    async def test_empty_results_not_cached(
        self, mock_stream_cache: AsyncMock
    ) -> None:
        resolver = AsyncMock()
        resolver.resolve = AsyncMock(return_value=[])
        uc = _make_uc(resolver=resolver, cache=mock_stream_cache)

        await uc.execute(_MOVIE)

        mock_stream_cache.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_results_cached_under_account_key(
        self, mock_stream_cache: AsyncMock
    ) -> None:
        uc = _make_uc(cache=mock_stream_cache)

        await uc.execute(_EPISODE)

        key, streams = mock_stream_cache.set.await_args.args
        assert key == stream_cache_key("tt0903747:1:5", "rd-key")
        assert [s.info_hash for s in streams] == [HASH_A]
