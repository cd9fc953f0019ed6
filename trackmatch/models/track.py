"""Track data models -- one record per local file and per streaming entry."""

from __future__ import annotations

from dataclasses import dataclass


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class LocalTrack:
    """A single file in the local collection.

    Title and artist may be missing when the file's tags could not be
    parsed. Instances are never mutated by the matching engine.

    Attributes:
        id: Identifier assigned by the ingestion layer.
        file_path: Location of the file.
        title: Title tag (or filename fallback).
        artist: Artist tag as stored in the file.
        primary_artist: Override for the main artist when the tag names several.
        album: Album tag.
        genre: Genre tag.
    """

    id: str
    file_path: str
    title: str | None = None
    artist: str | None = None
    primary_artist: str | None = None
    album: str | None = None
    genre: str | None = None

    @property
    def effective_artist(self) -> str | None:
        """Artist used for matching: the primary artist override if set."""
        return self.primary_artist or self.artist

    @property
    def display_label(self) -> str:
        """Human-readable 'Artist - Title' label, falling back to the path."""
        if self.title or self.artist:
            return f"{self.artist or '?'} - {self.title or '?'}"
        return self.file_path

    @classmethod
    def from_dict(cls, data: dict) -> LocalTrack:
        """Build a LocalTrack from a snake_case export record."""
        return cls(
            id=str(data["id"]),
            file_path=str(data.get("file_path") or ""),
            title=_optional_str(data, "title"),
            artist=_optional_str(data, "artist"),
            primary_artist=_optional_str(data, "primary_artist"),
            album=_optional_str(data, "album"),
            genre=_optional_str(data, "genre"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "primary_artist": self.primary_artist,
            "album": self.album,
            "genre": self.genre,
            "file_path": self.file_path,
        }


@dataclass(frozen=True)
class StreamingTrack:
    """A single entry in the canonical streaming library.

    Attributes:
        id: Identifier in the streaming service.
        title: Track title as published.
        artist: Credited artist string (may list several artists).
        primary_artist: Override for the main artist.
        album: Album name.
        genre: Fine-grained genre.
        super_genre: Coarse genre category used for filtering.
    """

    id: str
    title: str
    artist: str
    primary_artist: str | None = None
    album: str | None = None
    genre: str | None = None
    super_genre: str | None = None

    @property
    def effective_artist(self) -> str:
        """Artist used for matching: the primary artist override if set."""
        return self.primary_artist or self.artist

    @property
    def display_label(self) -> str:
        """Human-readable 'Artist - Title' label."""
        return f"{self.artist} - {self.title}"

    @classmethod
    def from_dict(cls, data: dict) -> StreamingTrack:
        """Build a StreamingTrack from a snake_case export record."""
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            artist=str(data.get("artist") or ""),
            primary_artist=_optional_str(data, "primary_artist"),
            album=_optional_str(data, "album"),
            genre=_optional_str(data, "genre"),
            super_genre=_optional_str(data, "super_genre"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "primary_artist": self.primary_artist,
            "album": self.album,
            "genre": self.genre,
            "super_genre": self.super_genre,
        }
