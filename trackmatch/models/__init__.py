"""Data models for Track Match."""

from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.models.match_result import (
    LocalIndex,
    MatchResult,
    MatchTier,
    MissingTrack,
    NormalizedLocalRecord,
)
from trackmatch.models.eval_case import EvalCase, EvalFixture, FailureCategory, Verdict
from trackmatch.models.config import AppConfig

__all__ = [
    "LocalTrack",
    "StreamingTrack",
    "LocalIndex",
    "MatchResult",
    "MatchTier",
    "MissingTrack",
    "NormalizedLocalRecord",
    "EvalCase",
    "EvalFixture",
    "FailureCategory",
    "Verdict",
    "AppConfig",
]
