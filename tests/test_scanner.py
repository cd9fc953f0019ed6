"""Tests for LocalScanner -- directory walking and LocalTrack construction."""

from __future__ import annotations

from pathlib import Path

import pytest

from trackmatch.core.matcher import match_all
from trackmatch.core.scanner import LocalScanner, split_primary_artist
from trackmatch.models.track import StreamingTrack


class FakeTagReader:
    """Returns canned tags keyed by filename."""

    def __init__(self, tags_by_name: dict[str, dict]):
        self._tags = tags_by_name
        self.calls: list[Path] = []

    def read(self, path):
        self.calls.append(Path(path))
        return self._tags.get(Path(path).name, {})


@pytest.fixture
def library(tmp_path: Path) -> Path:
    root = tmp_path / "music"
    (root / "b_artist").mkdir(parents=True)
    (root / "a_artist").mkdir()
    for rel in (
        "b_artist/02 Second.flac",
        "a_artist/01 First.MP3",
        "a_artist/cover.jpg",
        "a_artist/notes.txt",
        "loose.m4a",
    ):
        (root / rel).write_bytes(b"")
    return root


class TestSplitPrimaryArtist:
    @pytest.mark.parametrize(
        "artist, expected",
        [
            ("Alice; Bob", "Alice"),
            ("Alice; Bob; Carol", "Alice"),
            ("Alice feat. Bob", "Alice"),
            ("Alice ft Bob", "Alice"),
            ("Alice Featuring Bob", "Alice"),
        ],
    )
    def test_multi_artist(self, artist: str, expected: str):
        assert split_primary_artist(artist) == expected

    def test_single_artist(self):
        assert split_primary_artist("Daft Punk") is None
        assert split_primary_artist("Left Hand") is None

    def test_ampersand_and_comma_belong_to_the_name(self):
        assert split_primary_artist("Simon & Garfunkel") is None
        assert split_primary_artist("Earth, Wind & Fire") is None
        assert split_primary_artist("Crosby, Stills & Nash feat. Young") == "Crosby, Stills & Nash"

    def test_empty(self):
        assert split_primary_artist(None) is None
        assert split_primary_artist("") is None


class TestScan:
    def test_finds_supported_files_sorted(self, library: Path):
        tracks = LocalScanner(tag_reader=FakeTagReader({})).scan(library)
        assert [t.id for t in tracks] == [
            "a_artist/01 First.MP3",
            "b_artist/02 Second.flac",
            "loose.m4a",
        ]

    def test_title_falls_back_to_filename(self, library: Path):
        tracks = LocalScanner(tag_reader=FakeTagReader({})).scan(library)
        assert tracks[0].title == "01 First"
        assert tracks[0].artist is None

    def test_uses_tags(self, library: Path):
        reader = FakeTagReader({
            "02 Second.flac": {
                "title": "Second Song",
                "artist": "Alice feat. Bob",
                "album": "LP",
                "genre": "House",
            },
        })
        tracks = LocalScanner(tag_reader=reader).scan(library)
        second = tracks[1]
        assert second.title == "Second Song"
        assert second.artist == "Alice feat. Bob"
        assert second.primary_artist == "Alice"
        assert second.effective_artist == "Alice"
        assert second.album == "LP"
        assert second.genre == "House"
        assert Path(second.file_path) == library / "b_artist" / "02 Second.flac"

    def test_album_artist_fallback(self, library: Path):
        reader = FakeTagReader({"loose.m4a": {"title": "Loose", "album_artist": "Various"}})
        tracks = LocalScanner(tag_reader=reader).scan(library)
        assert tracks[2].artist == "Various"

    def test_progress_callback(self, library: Path):
        progress = []
        scanner = LocalScanner(
            tag_reader=FakeTagReader({}),
            progress_callback=lambda current, total, name: progress.append((current, total, name)),
        )
        scanner.scan(library)
        assert progress == [(1, 3, "01 First.MP3"), (2, 3, "02 Second.flac"), (3, 3, "loose.m4a")]

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LocalScanner(tag_reader=FakeTagReader({})).scan(tmp_path / "nope")

    def test_root_is_file(self, tmp_path: Path):
        path = tmp_path / "file.mp3"
        path.write_bytes(b"")
        with pytest.raises(NotADirectoryError):
            LocalScanner(tag_reader=FakeTagReader({})).scan(path)

    def test_empty_directory(self, tmp_path: Path):
        assert LocalScanner(tag_reader=FakeTagReader({})).scan(tmp_path) == []


class TestScanThenMatch:
    def test_band_names_with_ampersand_and_comma_match(self, tmp_path: Path):
        root = tmp_path / "music"
        root.mkdir()
        (root / "boxer.mp3").write_bytes(b"")
        (root / "september.flac").write_bytes(b"")
        reader = FakeTagReader({
            "boxer.mp3": {"title": "The Boxer", "artist": "Simon & Garfunkel"},
            "september.flac": {"title": "September", "artist": "Earth, Wind & Fire"},
        })
        local = LocalScanner(tag_reader=reader).scan(root)
        assert [t.effective_artist for t in local] == ["Simon & Garfunkel", "Earth, Wind & Fire"]

        streaming = [
            StreamingTrack(id="sp1", title="The Boxer", artist="Simon & Garfunkel"),
            StreamingTrack(id="sp2", title="September", artist="Earth, Wind & Fire"),
        ]
        results = match_all(streaming, local)
        assert [r.matched for r in results] == [True, True]
