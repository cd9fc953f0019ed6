"""Labeled evaluation cases for measuring matching accuracy.

Each case is a streaming track that was reported as missing, annotated with
whether it really is missing or should have matched a local track, and if
so, which kind of metadata difference caused the miss.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from trackmatch.models.track import LocalTrack, StreamingTrack


class Verdict(str, Enum):
    """Ground truth for an eval case."""

    TRUE_MISSING = "true-missing"      # No local file exists
    FALSE_NEGATIVE = "false-negative"  # A local file exists and should match


class FailureCategory(str, Enum):
    """Why a false-negative case fails to match."""

    ARTIST_MISMATCH = "artist-mismatch"
    ARTIST_FEATURING = "artist-featuring"
    ARTIST_AMPERSAND = "artist-ampersand"
    TITLE_MISMATCH = "title-mismatch"
    TITLE_VERSION_CONFUSION = "title-version-confusion"
    TITLE_PUNCTUATION = "title-punctuation"
    TITLE_DIACRITICS = "title-diacritics"
    TITLE_REMASTER_SUFFIX = "title-remaster-suffix"
    TITLE_ABBREVIATION = "title-abbreviation"
    PRIMARY_ARTIST_EXTRACTION = "primary-artist-extraction"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> FailureCategory | None:
        """Parse a category string; empty means None, unrecognized means UNKNOWN."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class EvalCase:
    """A single labeled case.

    Attributes:
        id: Unique case identifier (e.g. 'eval-001').
        streaming_track: The track that was reported as missing.
        expected_local_match: Local track it should match; None when truly missing.
        verdict: Ground truth label.
        failure_category: Why matching fails, for false-negative cases.
        notes: Free text for human reviewers.
        super_genre: Coarse genre, for filtering eval runs.

    Raises:
        ValueError: If the verdict and expected match disagree.
    """

    id: str
    streaming_track: StreamingTrack
    expected_local_match: LocalTrack | None
    verdict: Verdict
    failure_category: FailureCategory | None = None
    notes: str = ""
    super_genre: str | None = None

    def __post_init__(self) -> None:
        if self.verdict is Verdict.TRUE_MISSING and self.expected_local_match is not None:
            raise ValueError(f"{self.id}: true-missing case must not have an expected match")
        if self.verdict is Verdict.FALSE_NEGATIVE and self.expected_local_match is None:
            raise ValueError(f"{self.id}: false-negative case requires an expected match")

    @property
    def is_false_negative(self) -> bool:
        return self.verdict is Verdict.FALSE_NEGATIVE

    @property
    def category_label(self) -> str:
        """Category used for per-category breakdowns."""
        if self.failure_category is None:
            return FailureCategory.UNKNOWN.value
        return self.failure_category.value


@dataclass
class EvalFixture:
    """A labeled corpus as stored on disk."""

    exported_at: str
    description: str
    cases: list[EvalCase] = field(default_factory=list)

    @property
    def total_cases(self) -> int:
        return len(self.cases)

    @property
    def false_negative_cases(self) -> list[EvalCase]:
        return [c for c in self.cases if c.verdict is Verdict.FALSE_NEGATIVE]

    @property
    def true_missing_cases(self) -> list[EvalCase]:
        return [c for c in self.cases if c.verdict is Verdict.TRUE_MISSING]

    @property
    def expected_local_tracks(self) -> list[LocalTrack]:
        """Every expected match in case order, for the combined eval index."""
        return [c.expected_local_match for c in self.cases if c.expected_local_match is not None]
