"""Exceptions raised by the collaborators around the matching engine.

The engine itself (normalizer, index, matcher) never raises.
"""

from __future__ import annotations


class TrackMatchError(Exception):
    pass


class TrackLoadError(TrackMatchError):
    pass


class FixtureError(TrackMatchError):
    pass


class EvalRegressionError(TrackMatchError):
    pass
