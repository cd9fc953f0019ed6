"""Tests for trackmatch/utils/file_utils.py -- extension checks and track ids."""

from pathlib import Path

from trackmatch.utils.file_utils import is_audio_file, relative_track_id, strip_audio_extension

# ---------------------------------------------------------------------------
# is_audio_file
# ---------------------------------------------------------------------------


class TestIsAudioFile:
    """Tests for is_audio_file()."""

    def test_supported_extensions(self):
        assert is_audio_file("song.mp3")
        assert is_audio_file(Path("album/track.flac"))
        assert is_audio_file("track.m4a")

    def test_case_insensitive(self):
        assert is_audio_file("SONG.MP3")

    def test_rejects_other_files(self):
        assert not is_audio_file("cover.jpg")
        assert not is_audio_file("playlist.m3u")
        assert not is_audio_file("README")


# ---------------------------------------------------------------------------
# strip_audio_extension
# ---------------------------------------------------------------------------


class TestStripAudioExtension:
    def test_strips_supported_extension(self):
        assert strip_audio_extension("Strobe.mp3") == "Strobe"
        assert strip_audio_extension("Levels.FLAC") == "Levels"

    def test_keeps_inner_dots(self):
        assert strip_audio_extension("Mr. Brightside.m4a") == "Mr. Brightside"

    def test_other_extension_unchanged(self):
        assert strip_audio_extension("notes.txt") == "notes.txt"


# ---------------------------------------------------------------------------
# relative_track_id
# ---------------------------------------------------------------------------


class TestRelativeTrackId:
    def test_relative_posix_path(self, tmp_path: Path):
        path = tmp_path / "Artist" / "Album" / "01.mp3"
        assert relative_track_id(path, tmp_path) == "Artist/Album/01.mp3"

    def test_outside_root_falls_back_to_full_path(self, tmp_path: Path):
        other = Path("/elsewhere/song.mp3")
        assert relative_track_id(other, tmp_path) == "/elsewhere/song.mp3"
