"""Tests for TagReader -- tag extraction through mutagen's easy interface."""

from __future__ import annotations

from pathlib import Path

import mutagen
import pytest

from trackmatch.core.tag_reader import TagReader


@pytest.fixture
def reader() -> TagReader:
    return TagReader()


@pytest.fixture
def audio_path(tmp_path: Path) -> Path:
    path = tmp_path / "song.mp3"
    path.write_bytes(b"\x00" * 16)
    return path


class TestReadTags:
    def test_reads_easy_tags(self, reader: TagReader, audio_path: Path, monkeypatch):
        tags = {
            "title": ["Strobe "],
            "artist": ["deadmau5"],
            "albumartist": ["deadmau5"],
            "album": ["For Lack of a Better Name"],
            "genre": ["Progressive House"],
        }
        monkeypatch.setattr(mutagen, "File", lambda path, easy=False: tags)

        result = reader.read(audio_path)

        assert result == {
            "title": "Strobe",
            "artist": "deadmau5",
            "album_artist": "deadmau5",
            "album": "For Lack of a Better Name",
            "genre": "Progressive House",
        }

    def test_missing_tags_are_none(self, reader: TagReader, audio_path: Path, monkeypatch):
        monkeypatch.setattr(mutagen, "File", lambda path, easy=False: {"title": ["Only Title"], "artist": [""]})
        result = reader.read(audio_path)
        assert result["title"] == "Only Title"
        assert result["artist"] is None
        assert result["genre"] is None

    def test_unrecognized_file(self, reader: TagReader, audio_path: Path, monkeypatch):
        monkeypatch.setattr(mutagen, "File", lambda path, easy=False: None)
        assert set(reader.read(audio_path).values()) == {None}

    def test_mutagen_error_is_logged_not_raised(self, reader: TagReader, audio_path: Path, monkeypatch, caplog):
        def _broken(path, easy=False):
            raise mutagen.MutagenError("corrupt header")

        monkeypatch.setattr(mutagen, "File", _broken)
        result = reader.read(audio_path)
        assert result["title"] is None
        assert "corrupt header" in caplog.text

    def test_nonexistent_file(self, reader: TagReader, tmp_path: Path):
        result = reader.read(tmp_path / "missing.flac")
        assert result["title"] is None

    def test_real_unparseable_file(self, reader: TagReader, tmp_path: Path):
        path = tmp_path / "garbage.flac"
        path.write_bytes(b"this is not audio")
        result = reader.read(path)
        assert result["artist"] is None


class TestGetTag:
    def test_list_value(self, reader: TagReader):
        assert reader._get_tag({"title": [" Song "]}, "title") == "Song"

    def test_plain_value(self, reader: TagReader):
        assert reader._get_tag({"title": "Song"}, "title") == "Song"

    def test_missing_key(self, reader: TagReader):
        assert reader._get_tag({}, "title") is None

    def test_blank_value(self, reader: TagReader):
        assert reader._get_tag({"title": ["   "]}, "title") is None
