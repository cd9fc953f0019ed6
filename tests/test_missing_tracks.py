"""Tests for missing-track detection and streaming library filters."""

from __future__ import annotations

import pytest

from trackmatch.core.missing_tracks import (
    describe_filters,
    filter_streaming_tracks,
    find_missing_tracks,
    list_super_genres,
    missing_from_results,
)
from trackmatch.core.matcher import match_all
from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.utils.constants import MISSING_REASON_NO_MATCH


@pytest.fixture
def streaming_library() -> list[StreamingTrack]:
    return [
        StreamingTrack(id="1", title="Strobe", artist="deadmau5", genre="progressive house", super_genre="Electronic"),
        StreamingTrack(id="2", title="Levels", artist="Avicii", genre="progressive house", super_genre="Electronic"),
        StreamingTrack(id="3", title="Windowlicker", artist="Aphex Twin", genre="idm", super_genre="Electronic"),
        StreamingTrack(id="4", title="Paranoid Android", artist="Radiohead", genre="alt rock", super_genre="Rock"),
        StreamingTrack(id="5", title="Untagged", artist="Nobody"),
    ]


@pytest.fixture
def local_collection() -> list[LocalTrack]:
    return [
        LocalTrack(id="a", file_path="/m/strobe.mp3", title="Strobe (Club Edit)", artist="deadmau5"),
        LocalTrack(id="b", file_path="/m/pa.flac", title="Paranoid Android", artist="Radiohead"),
    ]


class TestFilterStreamingTracks:
    def test_no_filters(self, streaming_library):
        assert filter_streaming_tracks(streaming_library) == streaming_library

    def test_all_means_no_filter(self, streaming_library):
        assert filter_streaming_tracks(streaming_library, super_genre="all", genre="all") == streaming_library

    def test_super_genre(self, streaming_library):
        selected = filter_streaming_tracks(streaming_library, super_genre="Electronic")
        assert [t.id for t in selected] == ["1", "2", "3"]

    def test_cascading_filters(self, streaming_library):
        selected = filter_streaming_tracks(
            streaming_library, super_genre="Electronic", genre="progressive house", artist="Avicii"
        )
        assert [t.id for t in selected] == ["2"]

    def test_artist_filter_is_exact(self, streaming_library):
        assert filter_streaming_tracks(streaming_library, artist="avicii") == []


class TestHelpers:
    def test_list_super_genres(self, streaming_library):
        assert list_super_genres(streaming_library) == ["Electronic", "Rock"]

    def test_describe_filters(self):
        assert describe_filters() == ""
        assert describe_filters(super_genre="all") == ""
        assert describe_filters(super_genre="Rock", artist="Radiohead") == " (supergenre: Rock, artist: Radiohead)"

    def test_missing_from_results(self, streaming_library, local_collection):
        missing = missing_from_results(match_all(streaming_library, local_collection))
        assert [m.streaming_track.id for m in missing] == ["2", "3", "5"]
        assert all(m.reason == MISSING_REASON_NO_MATCH for m in missing)


class TestFindMissingTracks:
    def test_whole_library(self, streaming_library, local_collection):
        missing = find_missing_tracks(streaming_library, local_collection)
        assert [m.streaming_track.title for m in missing] == ["Levels", "Windowlicker", "Untagged"]

    def test_filtered(self, streaming_library, local_collection):
        missing = find_missing_tracks(streaming_library, local_collection, super_genre="Rock")
        assert missing == []

    def test_empty_local_collection(self, streaming_library):
        missing = find_missing_tracks(streaming_library, [], super_genre="Electronic")
        assert len(missing) == 3
