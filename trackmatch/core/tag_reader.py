"""Tag reader -- reads the matching-relevant metadata tags via mutagen."""

from __future__ import annotations

from pathlib import Path

import mutagen

from trackmatch.utils.logger import get_logger

logger = get_logger("core.tag_reader")

# Easy-interface tag keys -> field names in the returned dict
TAG_FIELDS = {
    "title": "title",
    "artist": "artist",
    "albumartist": "album_artist",
    "album": "album",
    "genre": "genre",
}


class TagReader:
    """Reads metadata tags from MP3, FLAC and M4A files.

    Read-only: audio data and tags are never modified. Unreadable files
    produce an all-None result instead of an exception.
    """

    def read(self, path: Path | str) -> dict[str, str | None]:
        """Read title, artist, album artist, album and genre from a file.

        Args:
            path: Audio file to read.

        Returns:
            Dict with keys ``title``, ``artist``, ``album_artist``, ``album``,
            ``genre``. Missing or unreadable tags are None.
        """
        tags: dict[str, str | None] = {name: None for name in TAG_FIELDS.values()}
        path = Path(path)
        if not path.exists():
            logger.warning("File not found for tag reading: %s", path)
            return tags

        try:
            audio = mutagen.File(path, easy=True)
            if audio is None:
                logger.warning("Mutagen could not open: %s", path)
                return tags

            for key, name in TAG_FIELDS.items():
                tags[name] = self._get_tag(audio, key)

            logger.debug("Read tags for: %s -> %s - %s", path.name, tags["artist"], tags["title"])

        except (mutagen.MutagenError, OSError, ValueError) as e:
            logger.error("Error reading tags from %s: %s", path, e)

        return tags

    def _get_tag(self, audio: mutagen.FileType, key: str) -> str | None:
        """Extract a single tag value from a mutagen file object.

        Args:
            audio: Mutagen file object (opened with easy=True).
            key: Tag key name.

        Returns:
            First tag value as a stripped string, or None.
        """
        try:
            value = audio.get(key)
            if value:
                # Mutagen returns lists for most tag types
                if isinstance(value, list):
                    value = value[0]
                return str(value).strip() or None
        except (KeyError, IndexError, TypeError):
            pass
        return None
