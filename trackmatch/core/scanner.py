"""Local scanner -- catalogs the audio files of a local collection."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Generator

from trackmatch.core.tag_reader import TagReader
from trackmatch.models.track import LocalTrack
from trackmatch.utils.file_utils import is_audio_file, relative_track_id, strip_audio_extension
from trackmatch.utils.logger import get_logger

logger = get_logger("core.scanner")

# Separators between credited artists in a single artist tag. "&" and ","
# are not among them: they are part of many single act names.
ARTIST_SPLIT_RE = re.compile(r"\s*(?:;|\s(?:feat\.?|ft\.?|featuring)\s)\s*", re.IGNORECASE)


def split_primary_artist(artist: str | None) -> str | None:
    """Return the first credited artist of a multi-artist tag.

    Args:
        artist: Raw artist tag.

    Returns:
        The first name when the tag credits several artists, else None
        (the artist tag itself is then used for matching).
    """
    if not artist:
        return None
    parts = [p.strip() for p in ARTIST_SPLIT_RE.split(artist) if p.strip()]
    if len(parts) < 2:
        return None
    return parts[0]


class LocalScanner:
    """Discovers audio files in a directory tree and creates LocalTrack objects.

    Usage:
        scanner = LocalScanner()
        tracks = scanner.scan("/path/to/music")
    """

    def __init__(
        self,
        tag_reader: TagReader | None = None,
        progress_callback: Callable[[int, int, str], None] | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            tag_reader: Reader used for file tags (a new TagReader if None).
            progress_callback: Optional callback(current, total, filename)
                called for each file cataloged.
        """
        self._tag_reader = tag_reader or TagReader()
        self._progress_callback = progress_callback

    def scan(self, root: Path | str) -> list[LocalTrack]:
        """Scan a directory tree and return one LocalTrack per audio file.

        Args:
            root: Root directory of the local collection.

        Returns:
            LocalTracks in sorted path order.

        Raises:
            FileNotFoundError: If root directory does not exist.
            NotADirectoryError: If root is not a directory.
        """
        root = Path(root)
        if not root.exists():
            raise FileNotFoundError(f"Directory not found: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")

        logger.info("Scanning directory: %s", root)

        # Collect all audio files first for accurate progress tracking
        audio_files = list(self._discover_audio_files(root))
        total = len(audio_files)
        logger.info("Found %d audio files", total)

        tracks: list[LocalTrack] = []
        for idx, file_path in enumerate(audio_files, start=1):
            tracks.append(self._create_track(file_path, root))

            if self._progress_callback:
                self._progress_callback(idx, total, file_path.name)

        logger.info("Scan complete: %d tracks cataloged", len(tracks))
        return tracks

    def _discover_audio_files(self, root: Path) -> Generator[Path, None, None]:
        try:
            for entry in sorted(root.rglob("*")):
                if entry.is_file() and is_audio_file(entry):
                    yield entry
        except PermissionError as e:
            logger.warning("Permission denied during scan: %s", e)

    def _create_track(self, file_path: Path, root: Path) -> LocalTrack:
        tags = self._tag_reader.read(file_path)
        artist = tags.get("artist") or tags.get("album_artist")
        return LocalTrack(
            id=relative_track_id(file_path, root),
            file_path=str(file_path),
            title=tags.get("title") or strip_audio_extension(file_path.name),
            artist=artist,
            primary_artist=split_primary_artist(artist),
            album=tags.get("album"),
            genre=tags.get("genre"),
        )
