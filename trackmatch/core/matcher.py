"""Tiered matching of streaming tracks against a local index.

Tiers, tried in order, first match wins:

1. exact    -- normalized title + artist key is in the local index
2. core     -- core title (no version/mix info) + artist key is in the index
2b. cross   -- same artist, and one side's full title equals the other's core
3. fuzzy    -- same artist, title or core similarity >= threshold

Tiers 2b and 3 only ever compare records with an identical normalized
artist. Tier 3 takes the first record that reaches the threshold in index
order, not the best-scoring one.
"""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from trackmatch.core.local_index import build_local_index
from trackmatch.core.normalizer import normalize, normalize_artist
from trackmatch.core.similarity import FuzzyMatcher
from trackmatch.core.version_extractor import extract_core_title
from trackmatch.models.match_result import (
    LocalIndex,
    MatchResult,
    MatchTier,
    NormalizedLocalRecord,
    make_key,
)
from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.utils.constants import FUZZY_MATCH_THRESHOLD
from trackmatch.utils.logger import get_logger

logger = get_logger("core.matcher")


class MatchStage(str, Enum):
    """Decision points reported to a match observer."""

    EXACT = "exact"
    CORE = "core"
    CROSS = "cross"
    FUZZY_CANDIDATE = "fuzzy-candidate"
    FUZZY = "fuzzy"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class MatchEvent:
    """One tier decision (or fuzzy candidate score) for a streaming track."""

    stage: MatchStage
    matched: bool
    streaming_track: StreamingTrack
    key: str | None = None
    record: NormalizedLocalRecord | None = None
    title_similarity: float | None = None
    core_similarity: float | None = None


MatchObserver = Callable[[MatchEvent], None]


def _ignore_event(event: MatchEvent) -> None:
    return None


class TermTraceObserver:
    """Logs match decisions at DEBUG level for selected tracks.

    A track is traced when its title or artist contains one of ``terms``
    (case-insensitive). Useful for diagnosing why one specific track is
    reported as missing.
    """

    def __init__(self, terms: Iterable[str]) -> None:
        self._terms = tuple(t.lower() for t in terms if t)
        self._logger = get_logger("core.matcher.trace")

    def wants(self, track: StreamingTrack) -> bool:
        if not self._terms:
            return False
        combined = f"{track.title or ''} {track.effective_artist or ''}".lower()
        return any(term in combined for term in self._terms)

    def __call__(self, event: MatchEvent) -> None:
        if not self.wants(event.streaming_track):
            return

        track = event.streaming_track
        outcome = "MATCH" if event.matched else "no match"
        if event.stage is MatchStage.FUZZY_CANDIDATE:
            self._logger.debug(
                "  fuzzy candidate %r: title=%.1f%% core=%.1f%%",
                event.record.track.title if event.record else None,
                event.title_similarity or 0.0,
                event.core_similarity or 0.0,
            )
        elif event.stage is MatchStage.UNMATCHED:
            self._logger.debug("%r by %r: MISSING", track.title, track.artist)
        elif event.record is not None:
            self._logger.debug(
                "%r by %r: %s %s (key=%r, local=%r)",
                track.title, track.artist, event.stage.value, outcome,
                event.key, event.record.track.file_path,
            )
        else:
            self._logger.debug(
                "%r by %r: %s %s (key=%r)",
                track.title, track.artist, event.stage.value, outcome, event.key,
            )


def match_track(
    streaming_track: StreamingTrack,
    local_index: LocalIndex,
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
    observer: MatchObserver | None = None,
) -> MatchResult:
    """Match one streaming track against a prebuilt local index.

    Deterministic for identical inputs and never raises: absent title or
    artist fields normalize to empty strings and simply fail to match.

    Args:
        streaming_track: Track to look up.
        local_index: Index from ``build_local_index``.
        fuzzy_threshold: Minimum similarity (0-100) for a tier-3 match.
        observer: Optional callback notified at each tier decision.

    Returns:
        MatchResult describing which tier matched, if any.
    """
    notify = observer or _ignore_event

    title = normalize(streaming_track.title)
    core_title = extract_core_title(streaming_track.title)
    artist = normalize_artist(streaming_track.effective_artist)

    def _result(
        tier: MatchTier | None,
        record: NormalizedLocalRecord | None = None,
        score: float | None = None,
    ) -> MatchResult:
        return MatchResult(
            matched=tier is not None,
            tier=tier,
            streaming_track=streaming_track,
            normalized_streaming_title=title,
            normalized_streaming_core_title=core_title,
            normalized_streaming_artist=artist,
            matched_local_track=record.track if record else None,
            similarity=score,
            normalized_local_title=record.title if record else None,
            normalized_local_artist=record.artist if record else None,
        )

    # Tier 1: exact title + artist
    exact_key = make_key(title, artist)
    record = local_index.exact_keys.get(exact_key)
    notify(MatchEvent(MatchStage.EXACT, record is not None, streaming_track, exact_key, record))
    if record is not None:
        return _result(MatchTier.EXACT, record)

    # Tier 2: core title + artist
    core_key = make_key(core_title, artist)
    record = local_index.core_keys.get(core_key)
    notify(MatchEvent(MatchStage.CORE, record is not None, streaming_track, core_key, record))
    if record is not None:
        return _result(MatchTier.CORE, record)

    candidates = local_index.records_for_artist(artist)

    # Tier 2b: one side kept version info the other side stripped
    for candidate in candidates:
        if title == candidate.core_title or core_title == candidate.title:
            notify(MatchEvent(MatchStage.CROSS, True, streaming_track, core_key, candidate))
            return _result(MatchTier.CORE, candidate)
    notify(MatchEvent(MatchStage.CROSS, False, streaming_track, core_key))

    # Tier 3: fuzzy, first sufficient candidate wins
    fuzzy = FuzzyMatcher(fuzzy_threshold)
    for candidate in candidates:
        title_sim = fuzzy.similarity(candidate.title, title)
        core_sim = fuzzy.similarity(candidate.core_title, core_title)
        notify(MatchEvent(
            MatchStage.FUZZY_CANDIDATE, False, streaming_track,
            record=candidate, title_similarity=title_sim, core_similarity=core_sim,
        ))
        if fuzzy.passes(title_sim, core_sim):
            notify(MatchEvent(
                MatchStage.FUZZY, True, streaming_track,
                record=candidate, title_similarity=title_sim, core_similarity=core_sim,
            ))
            return _result(MatchTier.FUZZY, candidate, max(title_sim, core_sim))

    notify(MatchEvent(MatchStage.UNMATCHED, False, streaming_track))
    return _result(None)


def match_all(
    streaming_tracks: Iterable[StreamingTrack],
    local_tracks: Iterable[LocalTrack],
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
    observer: MatchObserver | None = None,
) -> list[MatchResult]:
    """Match every streaming track against one index built from ``local_tracks``.

    Returns exactly one result per streaming track, in input order.
    """
    t0 = time.perf_counter()
    local_index = build_local_index(local_tracks)
    results = [
        match_track(track, local_index, fuzzy_threshold=fuzzy_threshold, observer=observer)
        for track in streaming_tracks
    ]

    tiers = Counter(r.tier_label for r in results)
    elapsed_ms = int((time.perf_counter() - t0) * 1000)
    logger.info(
        "Matched %d streaming tracks against %d local tracks in %dms "
        "(exact=%d core=%d fuzzy=%d missing=%d)",
        len(results), len(local_index), elapsed_ms,
        tiers["exact"], tiers["core"], tiers["fuzzy"], tiers["none"],
    )
    return results
