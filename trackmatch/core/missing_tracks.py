"""Missing-track detection: streaming tracks with no local counterpart."""

from __future__ import annotations

from typing import Iterable

from trackmatch.core.matcher import MatchObserver, match_all
from trackmatch.models.match_result import MatchResult, MissingTrack
from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.utils.constants import FILTER_ALL, FUZZY_MATCH_THRESHOLD, MISSING_REASON_NO_MATCH
from trackmatch.utils.logger import get_logger

logger = get_logger("core.missing_tracks")


def _is_active(value: str | None) -> bool:
    return bool(value) and value != FILTER_ALL


def filter_streaming_tracks(
    tracks: Iterable[StreamingTrack],
    super_genre: str | None = None,
    genre: str | None = None,
    artist: str | None = None,
) -> list[StreamingTrack]:
    """Apply cascading equality filters to the streaming library.

    A filter that is None, empty or ``"all"`` is ignored.

    Args:
        tracks: Streaming library.
        super_genre: Keep only this coarse genre.
        genre: Keep only this genre.
        artist: Keep only this exact artist string.

    Returns:
        Filtered tracks, original order preserved.
    """
    selected = list(tracks)
    if _is_active(super_genre):
        selected = [t for t in selected if t.super_genre == super_genre]
    if _is_active(genre):
        selected = [t for t in selected if t.genre == genre]
    if _is_active(artist):
        selected = [t for t in selected if t.artist == artist]
    return selected


def describe_filters(
    super_genre: str | None = None,
    genre: str | None = None,
    artist: str | None = None,
) -> str:
    """Human-readable summary of the active filters ('' when none)."""
    parts = []
    if _is_active(super_genre):
        parts.append(f"supergenre: {super_genre}")
    if _is_active(genre):
        parts.append(f"genre: {genre}")
    if _is_active(artist):
        parts.append(f"artist: {artist}")
    return f" ({', '.join(parts)})" if parts else ""


def list_super_genres(tracks: Iterable[StreamingTrack]) -> list[str]:
    """Sorted unique super genres present in the streaming library."""
    return sorted({t.super_genre for t in tracks if t.super_genre})


def missing_from_results(results: Iterable[MatchResult]) -> list[MissingTrack]:
    return [
        MissingTrack(streaming_track=r.streaming_track, reason=MISSING_REASON_NO_MATCH)
        for r in results
        if r.is_missing
    ]


def find_missing_tracks(
    streaming_tracks: Iterable[StreamingTrack],
    local_tracks: Iterable[LocalTrack],
    *,
    super_genre: str | None = None,
    genre: str | None = None,
    artist: str | None = None,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
    observer: MatchObserver | None = None,
) -> list[MissingTrack]:
    """Return the (filtered) streaming tracks that match no local track.

    Args:
        streaming_tracks: Streaming library.
        local_tracks: Local collection.
        super_genre: Optional coarse genre filter.
        genre: Optional genre filter.
        artist: Optional artist filter.
        fuzzy_threshold: Minimum similarity for a tier-3 match.
        observer: Optional match observer for tracing.

    Returns:
        Missing tracks in streaming-library order.
    """
    selected = filter_streaming_tracks(streaming_tracks, super_genre, genre, artist)
    logger.info(
        "Checking %d streaming tracks%s",
        len(selected), describe_filters(super_genre, genre, artist),
    )
    results = match_all(
        selected, local_tracks, fuzzy_threshold=fuzzy_threshold, observer=observer
    )
    missing = missing_from_results(results)
    logger.info("%d of %d streaming tracks are missing locally", len(missing), len(selected))
    return missing
