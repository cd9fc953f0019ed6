"""Match result models -- the local index and per-track verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Mapping

from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.utils.constants import KEY_SEPARATOR


class MatchTier(IntEnum):
    """Matching strategy that produced a match, in decreasing strictness."""

    EXACT = 1
    CORE = 2
    FUZZY = 3

    @property
    def label(self) -> str:
        return self.name.lower()


def make_key(title: str, artist: str) -> str:
    """Join a normalized title and artist into a comparison key."""
    return f"{title}{KEY_SEPARATOR}{artist}"


@dataclass(frozen=True)
class NormalizedLocalRecord:
    """Comparison strings for one local track.

    The source track is referenced, never copied or modified.

    Attributes:
        track: The LocalTrack these strings were derived from.
        title: Normalized full title.
        core_title: Normalized title with version/mix info removed.
        artist: Normalized effective artist.
    """

    track: LocalTrack
    title: str
    core_title: str
    artist: str

    @property
    def exact_key(self) -> str:
        return make_key(self.title, self.artist)

    @property
    def core_key(self) -> str:
        return make_key(self.core_title, self.artist)


@dataclass(frozen=True)
class LocalIndex:
    """Lookup structures over a local collection, built once per matching run.

    ``exact_keys`` and ``core_keys`` map each key to the first record that
    produced it; duplicates collapse. ``records`` keeps input order.
    """

    exact_keys: Mapping[str, NormalizedLocalRecord]
    core_keys: Mapping[str, NormalizedLocalRecord]
    records: tuple[NormalizedLocalRecord, ...]

    def __len__(self) -> int:
        return len(self.records)

    def records_for_artist(self, artist: str) -> list[NormalizedLocalRecord]:
        """Return records whose normalized artist equals ``artist``, in order."""
        return [r for r in self.records if r.artist == artist]


@dataclass(frozen=True)
class MatchResult:
    """Verdict for one streaming track in one matching run.

    Attributes:
        matched: Whether any tier matched.
        tier: Tier that matched, or None.
        streaming_track: The track that was looked up.
        matched_local_track: Local track that satisfied the match, if known.
        similarity: Similarity percentage, only for fuzzy (tier 3) matches.
        normalized_streaming_title: Normalized full title used for lookup.
        normalized_streaming_core_title: Normalized core title used for lookup.
        normalized_streaming_artist: Normalized effective artist.
        normalized_local_title: Normalized title of the matched local track.
        normalized_local_artist: Normalized artist of the matched local track.
    """

    matched: bool
    tier: MatchTier | None
    streaming_track: StreamingTrack
    normalized_streaming_title: str
    normalized_streaming_core_title: str
    normalized_streaming_artist: str
    matched_local_track: LocalTrack | None = None
    similarity: float | None = None
    normalized_local_title: str | None = None
    normalized_local_artist: str | None = None

    @property
    def is_missing(self) -> bool:
        return not self.matched

    @property
    def tier_label(self) -> str:
        """Short tier name for reports ('exact', 'core', 'fuzzy' or 'none')."""
        return self.tier.label if self.tier is not None else "none"

    def to_dict(self) -> dict:
        """Serialize the result for JSON reports."""
        return {
            "matched": self.matched,
            "tier": int(self.tier) if self.tier is not None else None,
            "streaming_track": self.streaming_track.to_dict(),
            "matched_local_track": (
                self.matched_local_track.to_dict() if self.matched_local_track else None
            ),
            "similarity": self.similarity,
            "normalized_streaming_title": self.normalized_streaming_title,
            "normalized_streaming_core_title": self.normalized_streaming_core_title,
            "normalized_streaming_artist": self.normalized_streaming_artist,
            "normalized_local_title": self.normalized_local_title,
            "normalized_local_artist": self.normalized_local_artist,
        }


@dataclass(frozen=True)
class MissingTrack:
    """A streaming track with no counterpart in the local collection."""

    streaming_track: StreamingTrack
    reason: str
