"""Evaluation harness -- measures matching accuracy on a labeled corpus.

Vocabulary (from the missing-track report's point of view):

- true positive:  true-missing case that stays unmatched
- false positive: true-missing case that matched something (always a defect)
- true negative:  false-negative case that now matches (defect fixed)
- false negative: false-negative case that still does not match

All cases are matched against one index built from every case's expected
local match, so a true-missing track must not match another case's track
either.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from trackmatch.core.local_index import build_local_index
from trackmatch.core.matcher import match_track
from trackmatch.exceptions import EvalRegressionError
from trackmatch.models.eval_case import EvalCase, Verdict
from trackmatch.models.match_result import MatchResult
from trackmatch.utils.constants import (
    EVAL_REPORT_TITLE,
    FUZZY_MATCH_THRESHOLD,
    MAX_FALSE_NEGATIVE_RATE,
    REPORT_SAMPLE_LIMIT,
)
from trackmatch.utils.logger import get_logger

logger = get_logger("core.evaluation")


@dataclass
class CategoryStats:
    """Pass/fail counts for one failure category."""

    count: int = 0
    matched: int = 0
    unmatched: int = 0

    @property
    def status(self) -> str:
        return "FIXED" if self.unmatched == 0 else f"{self.unmatched} failing"


@dataclass(frozen=True)
class EvalMetrics:
    """Aggregate accuracy numbers for one eval run."""

    total_cases: int
    true_positives: int
    true_negatives: int
    false_negatives: int
    false_positives: int
    match_recall: float
    false_negative_rate: float
    by_category: dict[str, CategoryStats] = field(default_factory=dict)

    def categories_by_failures(self) -> list[tuple[str, CategoryStats]]:
        """Categories ordered by failing count, worst first."""
        return sorted(self.by_category.items(), key=lambda item: item[1].unmatched, reverse=True)

    def to_dict(self) -> dict:
        return {
            "total_cases": self.total_cases,
            "true_positives": self.true_positives,
            "true_negatives": self.true_negatives,
            "false_negatives": self.false_negatives,
            "false_positives": self.false_positives,
            "match_recall": self.match_recall,
            "false_negative_rate": self.false_negative_rate,
            "by_category": {
                name: {"count": s.count, "matched": s.matched, "unmatched": s.unmatched}
                for name, s in self.by_category.items()
            },
        }


@dataclass(frozen=True)
class CaseOutcome:
    """Match result for a single eval case."""

    case: EvalCase
    result: MatchResult

    @property
    def matched(self) -> bool:
        return self.result.matched


@dataclass
class EvalReport:
    """Everything produced by one combined-index eval run."""

    metrics: EvalMetrics
    outcomes: list[CaseOutcome]

    @property
    def false_positives(self) -> list[CaseOutcome]:
        return [
            o for o in self.outcomes
            if o.case.verdict is Verdict.TRUE_MISSING and o.matched
        ]

    @property
    def failing_cases(self) -> list[CaseOutcome]:
        return [
            o for o in self.outcomes
            if o.case.verdict is Verdict.FALSE_NEGATIVE and not o.matched
        ]


def compute_metrics(cases: Sequence[EvalCase], results: Mapping[str, bool]) -> EvalMetrics:
    """Compute confusion counts, recall and the per-category breakdown.

    Args:
        cases: Labeled cases.
        results: Case id -> whether the matcher found a match. Missing ids
            count as unmatched.

    Returns:
        EvalMetrics. Recall is 1.0 and the false-negative rate 0.0 when
        there are no false-negative cases.
    """
    tp = tn = fn = fp = 0
    by_category: dict[str, CategoryStats] = {}

    for case in cases:
        did_match = results.get(case.id, False)

        if case.verdict is Verdict.TRUE_MISSING:
            if did_match:
                fp += 1
            else:
                tp += 1
            continue

        if did_match:
            tn += 1
        else:
            fn += 1

        stats = by_category.setdefault(case.category_label, CategoryStats())
        stats.count += 1
        if did_match:
            stats.matched += 1
        else:
            stats.unmatched += 1

    labeled = tn + fn
    return EvalMetrics(
        total_cases=len(cases),
        true_positives=tp,
        true_negatives=tn,
        false_negatives=fn,
        false_positives=fp,
        match_recall=tn / labeled if labeled else 1.0,
        false_negative_rate=fn / labeled if labeled else 0.0,
        by_category=by_category,
    )


def run_evaluation(
    cases: Sequence[EvalCase],
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> EvalReport:
    """Match every case against one index of all expected local matches.

    Args:
        cases: Labeled cases.
        fuzzy_threshold: Minimum similarity for a tier-3 match.

    Returns:
        EvalReport with metrics and per-case outcomes.
    """
    local_index = build_local_index(
        c.expected_local_match for c in cases if c.expected_local_match is not None
    )
    outcomes = [
        CaseOutcome(case, match_track(case.streaming_track, local_index, fuzzy_threshold=fuzzy_threshold))
        for case in cases
    ]
    metrics = compute_metrics(cases, {o.case.id: o.matched for o in outcomes})
    logger.info(
        "Eval: %d cases, recall %.1f%%, %d false negatives, %d false positives",
        metrics.total_cases, metrics.match_recall * 100,
        metrics.false_negatives, metrics.false_positives,
    )
    return EvalReport(metrics=metrics, outcomes=outcomes)


def evaluate_cases_individually(
    cases: Sequence[EvalCase],
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> list[CaseOutcome]:
    """Match each false-negative case against an index of only its own
    expected local track. True-missing cases are skipped."""
    outcomes = []
    for case in cases:
        if case.expected_local_match is None:
            continue
        local_index = build_local_index([case.expected_local_match])
        result = match_track(case.streaming_track, local_index, fuzzy_threshold=fuzzy_threshold)
        outcomes.append(CaseOutcome(case, result))
    return outcomes


def check_non_regression(
    metrics: EvalMetrics,
    max_false_negative_rate: float = MAX_FALSE_NEGATIVE_RATE,
) -> list[str]:
    """Return human-readable violations of the accuracy contract (empty if none)."""
    violations = []
    if metrics.false_positives != 0:
        violations.append(
            f"{metrics.false_positives} true-missing case(s) matched a local track"
        )
    if metrics.false_negative_rate > max_false_negative_rate:
        violations.append(
            f"false-negative rate {metrics.false_negative_rate:.1%} exceeds "
            f"ratchet {max_false_negative_rate:.1%}"
        )
    return violations


def assert_non_regression(
    metrics: EvalMetrics,
    max_false_negative_rate: float = MAX_FALSE_NEGATIVE_RATE,
) -> None:
    """Raise EvalRegressionError if the accuracy contract is violated."""
    violations = check_non_regression(metrics, max_false_negative_rate)
    if violations:
        raise EvalRegressionError("; ".join(violations))


def _track_label(title: str | None, artist: str | None) -> str:
    return f'"{title}" by "{artist}"'


def format_eval_report(report: EvalReport, description: str = "") -> list[str]:
    """Render an eval report as text lines."""
    m = report.metrics
    lines = [
        EVAL_REPORT_TITLE,
        f"Fixture: {description}",
        f"Total cases: {m.total_cases}",
        f"True positives (correctly missing): {m.true_positives}",
        f"True negatives (correctly matched): {m.true_negatives}",
        f"False negatives (should match but don't): {m.false_negatives}",
        f"False positives (matched incorrectly): {m.false_positives}",
        f"Match recall: {m.match_recall * 100:.1f}%",
        f"False negative rate: {m.false_negative_rate * 100:.1f}%",
    ]

    if m.by_category:
        lines += ["", "--- By Failure Category ---"]
        for name, stats in m.categories_by_failures():
            lines.append(f"  {name}: {stats.count} cases, {stats.matched} pass, {stats.status}")

    failing = report.failing_cases
    if failing:
        lines += ["", "--- Failing cases (sample) ---"]
        for outcome in failing[:REPORT_SAMPLE_LIMIT]:
            case = outcome.case
            local = case.expected_local_match
            lines.append(
                f"  {case.id} [{case.category_label}]: "
                f"{_track_label(case.streaming_track.title, case.streaming_track.artist)} vs "
                f"local {_track_label(local.title if local else None, local.artist if local else None)}"
            )
        if len(failing) > REPORT_SAMPLE_LIMIT:
            lines.append(f"  ... and {len(failing) - REPORT_SAMPLE_LIMIT} more")

    false_positives = report.false_positives
    if false_positives:
        lines += ["", "--- FALSE POSITIVES (investigate) ---"]
        for outcome in false_positives:
            case, result = outcome.case, outcome.result
            local = result.matched_local_track
            lines.append(
                f"  {case.id}: {_track_label(case.streaming_track.title, case.streaming_track.artist)}"
            )
            lines.append(
                f"    Matched tier {int(result.tier) if result.tier else None}, local: "
                f"{_track_label(local.title if local else None, local.artist if local else None)}"
            )

    lines.append("=" * len(EVAL_REPORT_TITLE))
    return lines
