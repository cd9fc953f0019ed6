"""Local index builder -- precomputes comparison keys for the local collection.

Normalizing every local track once per run, instead of inside the per
streaming-track loop, is what keeps batch matching linear in the number of
streaming tracks.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable

from trackmatch.core.normalizer import normalize, normalize_artist
from trackmatch.core.version_extractor import extract_core_title
from trackmatch.models.match_result import LocalIndex, NormalizedLocalRecord
from trackmatch.models.track import LocalTrack
from trackmatch.utils.constants import ARTIST_TITLE_SEPARATOR
from trackmatch.utils.logger import get_logger

logger = get_logger("core.local_index")


def strip_artist_prefix(
    title: str | None,
    artist: str | None,
    raw_artist: str | None = None,
) -> str:
    """Remove an embedded 'Artist - ' prefix from a title.

    Some sources store 'Artist - Title' in the title field. The effective
    artist is tried first, then the raw artist tag. Comparison is
    case-insensitive.

    Args:
        title: Raw title.
        artist: Effective artist (primary artist if present).
        raw_artist: The unmodified artist tag.

    Returns:
        Title without the prefix, or the title unchanged ('' if absent).
    """
    if not title or not artist:
        return title or ""
    title_lower = title.lower()
    for candidate in (artist, raw_artist):
        if not candidate:
            continue
        prefix = candidate.lower().strip() + ARTIST_TITLE_SEPARATOR
        if title_lower.startswith(prefix):
            return title[len(prefix):].strip()
    return title


def normalize_local_track(track: LocalTrack) -> NormalizedLocalRecord:
    """Compute the comparison strings for one local track."""
    artist = track.effective_artist
    title = strip_artist_prefix(track.title, artist, track.artist)
    return NormalizedLocalRecord(
        track=track,
        title=normalize(title),
        core_title=extract_core_title(title),
        artist=normalize_artist(artist),
    )


def build_local_index(tracks: Iterable[LocalTrack]) -> LocalIndex:
    """Build the lookup structures for one matching run.

    Every track contributes one record and one entry to each key map.
    Colliding keys keep the first record (duplicate files collapse into one
    matchable identity). Pure: the input tracks are not modified.

    Args:
        tracks: Local collection, in the order matching should scan it.

    Returns:
        A read-only LocalIndex.
    """
    records = tuple(normalize_local_track(track) for track in tracks)

    exact_keys: dict[str, NormalizedLocalRecord] = {}
    core_keys: dict[str, NormalizedLocalRecord] = {}
    for record in records:
        exact_keys.setdefault(record.exact_key, record)
        core_keys.setdefault(record.core_key, record)

    logger.debug(
        "Built local index: %d records, %d exact keys, %d core keys",
        len(records), len(exact_keys), len(core_keys),
    )
    return LocalIndex(
        exact_keys=MappingProxyType(exact_keys),
        core_keys=MappingProxyType(core_keys),
        records=records,
    )
