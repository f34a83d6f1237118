"""Tests for episode file selection."""

from __future__ import annotations

from debridarr.infrastructure.stremio.episode_matcher import (
    find_episode_file,
    is_video_file,
)


class TestIsVideoFile:
    def test_video(self) -> None:
        assert is_video_file("Movie.2020.MKV") is True

    def test_not_video(self) -> None:
        assert is_video_file("Movie.2020.srt") is False


class TestFindEpisodeFile:
    def test_sxxexx(self) -> None:
        names = ["Show.S01E01.mkv", "Show.S01E02.mkv", "Show.S01E03.mkv"]
        assert find_episode_file(names, 1, 2) == 2

    def test_does_not_match_longer_episode_number(self) -> None:
        names = ["Show.S01E10.mkv", "Show.S01E01.mkv"]
        assert find_episode_file(names, 1, 1) == 2

    def test_nxnn(self) -> None:
        names = ["show.1x04.avi", "show.1x05.avi"]
        assert find_episode_file(names, 1, 5) == 2

    def test_words(self) -> None:
        names = ["Season 2 Episode 1.mp4", "Season 2 Episode 3.mp4"]
        assert find_episode_file(names, 2, 3) == 2

    def test_cyrillic(self) -> None:
        names = ["Сезон 1 Серия 4.avi", "Сезон 1 Серия 5.avi"]
        assert find_episode_file(names, 1, 5) == 2

    def test_skips_non_video_files(self) -> None:
        names = ["Show.S01E02.srt", "Show.S01E02.mkv"]
        assert find_episode_file(names, 1, 2) == 2

    def test_fallback_to_first_video(self) -> None:
        names = ["readme.txt", "Movie.mkv", "Sample.mkv"]
        assert find_episode_file(names, 1, 9) == 2

    def test_no_video_files(self) -> None:
        assert find_episode_file(["a.txt", "b.nfo"], 1, 1) is None

    def test_no_episode_requested(self) -> None:
        assert find_episode_file(["cover.jpg", "Movie.mkv"], None, None) == 2
