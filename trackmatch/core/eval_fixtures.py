"""Eval fixture I/O and review tooling.

The labeled corpus is stored as JSON::

    {
      "exportedAt": "...",
      "description": "...",
      "totalCases": 2,
      "cases": [
        {"id": "eval-001", "spotifyTrack": {...}, "expectedLocalMatch": {...},
         "verdict": "false-negative", "failureCategory": "title-punctuation",
         "notes": "...", "superGenre": "Electronic"}
      ]
    }

Review workflow: ``format_raw_export`` turns a raw database export into a
draft fixture, ``export_review_csv`` flattens it for spreadsheet review, and
``merge_review_csv`` merges the reviewed labels back.
"""

from __future__ import annotations

import csv
import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path

from trackmatch.exceptions import FixtureError
from trackmatch.models.eval_case import EvalCase, EvalFixture, FailureCategory, Verdict
from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.utils.constants import EVAL_ID_FORMAT, REVIEW_CSV_COLUMNS
from trackmatch.utils.logger import get_logger

logger = get_logger("core.eval_fixtures")


@dataclass
class MergeSummary:
    """Outcome of merging a reviewed CSV into a fixture."""

    updated: int = 0
    unchanged: int = 0
    warnings: list[str] = field(default_factory=list)


# --- JSON fixture ---

def case_from_dict(data: dict) -> EvalCase:
    """Build an EvalCase from its camelCase JSON record.

    Raises:
        FixtureError: If a required key is missing or values are invalid.
    """
    try:
        local = data.get("expectedLocalMatch")
        return EvalCase(
            id=str(data["id"]),
            streaming_track=StreamingTrack.from_dict(data["spotifyTrack"]),
            expected_local_match=LocalTrack.from_dict(local) if local else None,
            verdict=Verdict(data["verdict"]),
            failure_category=FailureCategory.parse(data.get("failureCategory")),
            notes=data.get("notes") or "",
            super_genre=data.get("superGenre"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise FixtureError(f"Invalid eval case {data.get('id', '?')!r}: {e}") from e


def case_to_dict(case: EvalCase) -> dict:
    return {
        "id": case.id,
        "spotifyTrack": case.streaming_track.to_dict(),
        "expectedLocalMatch": (
            case.expected_local_match.to_dict() if case.expected_local_match else None
        ),
        "verdict": case.verdict.value,
        "failureCategory": case.failure_category.value if case.failure_category else None,
        "notes": case.notes,
        "superGenre": case.super_genre,
    }


def fixture_to_dict(fixture: EvalFixture) -> dict:
    return {
        "exportedAt": fixture.exported_at,
        "description": fixture.description,
        "totalCases": fixture.total_cases,
        "cases": [case_to_dict(c) for c in fixture.cases],
    }


def fixture_from_dict(data: dict) -> EvalFixture:
    """Build an EvalFixture from parsed JSON.

    Raises:
        FixtureError: If the structure is not a fixture or case ids repeat.
    """
    if not isinstance(data, dict) or not isinstance(data.get("cases"), list):
        raise FixtureError("Eval fixture must be an object with a 'cases' list")

    cases = [case_from_dict(c) for c in data["cases"]]
    seen: set[str] = set()
    for case in cases:
        if case.id in seen:
            raise FixtureError(f"Duplicate eval case id: {case.id}")
        seen.add(case.id)

    total = data.get("totalCases")
    if total is not None and total != len(cases):
        logger.warning("Fixture says totalCases=%s but contains %d cases", total, len(cases))

    return EvalFixture(
        exported_at=str(data.get("exportedAt") or ""),
        description=str(data.get("description") or ""),
        cases=cases,
    )


def _read_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise FixtureError(f"Fixture file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise FixtureError(f"Could not read {path}: {e}") from e


def load_fixture(path: Path | str) -> EvalFixture:
    """Load a labeled corpus from disk.

    Raises:
        FixtureError: If the file is missing or malformed.
    """
    path = Path(path)
    fixture = fixture_from_dict(_read_json(path))
    logger.info(
        "Loaded %d eval cases from %s (%d false-negative, %d true-missing)",
        fixture.total_cases, path,
        len(fixture.false_negative_cases), len(fixture.true_missing_cases),
    )
    return fixture


def save_fixture(fixture: EvalFixture, path: Path | str) -> None:
    """Write a fixture as indented JSON (parent directories are created)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(fixture_to_dict(fixture), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("Wrote %d eval cases to %s", fixture.total_cases, path)


# --- Raw export -> draft fixture ---

def _unwrap_raw_export(raw: object) -> dict:
    # SQL editors wrap the result row as [{"export_data": {...}}]
    data = raw
    if isinstance(data, list):
        data = data[0] if data else {}
    if isinstance(data, dict) and "export_data" in data:
        data = data["export_data"]
    if not isinstance(data, dict):
        raise FixtureError("Raw export must be an object (optionally wrapped as export_data)")
    return data


def _candidate_to_local(candidate: dict) -> LocalTrack:
    return LocalTrack(
        id=str(candidate["local_id"]),
        file_path=str(candidate.get("local_file_path") or ""),
        title=candidate.get("local_title"),
        artist=candidate.get("local_artist"),
        primary_artist=candidate.get("local_primary_artist"),
        album=candidate.get("local_album"),
        genre=candidate.get("local_genre"),
    )


def format_raw_export(raw: object) -> EvalFixture:
    """Turn a raw export of unmatched streaming tracks into a draft fixture.

    Every streaming track with at least one same-artist local candidate
    becomes a ``false-negative`` case (category ``unknown``, first candidate
    as the expected match) awaiting human review; the rest become
    ``true-missing``.

    Args:
        raw: Parsed export with ``exportedAt``, ``superGenre``,
            ``spotify_tracks`` and ``candidate_local_matches``.

    Returns:
        Draft EvalFixture with ids ``eval-001``, ``eval-002``, ...

    Raises:
        FixtureError: If the export structure is invalid.
    """
    data = _unwrap_raw_export(raw)
    super_genre = data.get("superGenre")
    streaming_records = data.get("spotify_tracks") or []
    candidate_records = data.get("candidate_local_matches") or []

    candidates_by_id: dict[str, list[dict]] = {}
    for candidate in candidate_records:
        candidates_by_id.setdefault(str(candidate.get("spotify_id")), []).append(candidate)

    cases = []
    try:
        for index, record in enumerate(streaming_records, start=1):
            streaming = StreamingTrack.from_dict(record)
            candidates = candidates_by_id.get(streaming.id, [])
            if candidates:
                first = candidates[0]
                cases.append(EvalCase(
                    id=EVAL_ID_FORMAT.format(index=index),
                    streaming_track=streaming,
                    expected_local_match=_candidate_to_local(first),
                    verdict=Verdict.FALSE_NEGATIVE,
                    failure_category=FailureCategory.UNKNOWN,
                    notes=(
                        f"{len(candidates)} local candidate(s) found. First: "
                        f'"{first.get("local_title")}" by "{first.get("local_artist")}". '
                        "REVIEW: confirm this is the correct match and set failureCategory."
                    ),
                    super_genre=super_genre,
                ))
            else:
                cases.append(EvalCase(
                    id=EVAL_ID_FORMAT.format(index=index),
                    streaming_track=streaming,
                    expected_local_match=None,
                    verdict=Verdict.TRUE_MISSING,
                    notes="No local candidates found by this artist.",
                    super_genre=super_genre,
                ))
    except (KeyError, TypeError, AttributeError) as e:
        raise FixtureError(f"Invalid raw export record: {e}") from e

    fixture = EvalFixture(
        exported_at=str(data.get("exportedAt") or ""),
        description=f"Unmatched tracks for {super_genre} - exported for eval review",
        cases=cases,
    )
    logger.info(
        "Formatted %d eval cases (%d false-negative candidates, %d true-missing)",
        fixture.total_cases, len(fixture.false_negative_cases), len(fixture.true_missing_cases),
    )
    return fixture


def format_raw_export_file(input_path: Path | str, output_path: Path | str) -> EvalFixture:
    """Read a raw export file, format it and save the draft fixture."""
    fixture = format_raw_export(_read_json(Path(input_path)))
    save_fixture(fixture, output_path)
    return fixture


# --- Review CSV ---

def export_review_csv(fixture: EvalFixture, path: Path | str) -> int:
    """Flatten a fixture into a CSV for spreadsheet review.

    Only ``verdict``, ``failureCategory`` and ``notes`` are meant to be
    edited; the other columns are context for the reviewer.

    Returns:
        Number of rows written (excluding the header).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=REVIEW_CSV_COLUMNS)
        writer.writeheader()
        for case in fixture.cases:
            local = case.expected_local_match
            writer.writerow({
                "id": case.id,
                "verdict": case.verdict.value,
                "failureCategory": case.failure_category.value if case.failure_category else "",
                "spotify_title": case.streaming_track.title,
                "spotify_artist": case.streaming_track.artist,
                "local_title": (local.title or "") if local else "",
                "local_artist": (local.artist or "") if local else "",
                "local_file_path": local.file_path if local else "",
                "notes": case.notes,
            })
    logger.info("Wrote %d review rows to %s", fixture.total_cases, path)
    return fixture.total_cases


def _merge_row(case: EvalCase, row: dict, warnings: list[str]) -> EvalCase:
    changes: dict = {}

    new_verdict = (row.get("verdict") or "").strip()
    if new_verdict and new_verdict != case.verdict.value:
        try:
            verdict = Verdict(new_verdict)
        except ValueError:
            warnings.append(f'{case.id}: invalid verdict "{new_verdict}" - skipped')
        else:
            if verdict is Verdict.FALSE_NEGATIVE and case.expected_local_match is None:
                warnings.append(f"{case.id}: false-negative needs an expected local match - skipped")
            else:
                changes["verdict"] = verdict

    new_category = (row.get("failureCategory") or "").strip()
    old_category = case.failure_category.value if case.failure_category else ""
    if new_category != old_category:
        category = FailureCategory.parse(new_category)
        if new_category and category is FailureCategory.UNKNOWN and new_category != category.value:
            warnings.append(f'{case.id}: unknown failureCategory "{new_category}" - stored as unknown')
        if category != case.failure_category:
            changes["failure_category"] = category

    new_notes = row.get("notes") or ""
    if new_notes != case.notes:
        changes["notes"] = new_notes

    # A true-missing case has nothing to match and no failure cause
    if changes.get("verdict", case.verdict) is Verdict.TRUE_MISSING:
        if case.expected_local_match is not None:
            changes["expected_local_match"] = None
        if changes.get("failure_category", case.failure_category) is not None:
            changes["failure_category"] = None

    return dataclasses.replace(case, **changes) if changes else case


def merge_review_csv(fixture: EvalFixture, path: Path | str) -> MergeSummary:
    """Merge reviewed labels from a CSV back into ``fixture`` (in place).

    Rows are matched by ``id``. Only ``verdict``, ``failureCategory`` and
    ``notes`` are taken from the CSV; everything else keeps its fixture
    value.

    Returns:
        MergeSummary with update counts and warnings for skipped values.

    Raises:
        FixtureError: If the CSV cannot be read or lacks an ``id`` column.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None or "id" not in reader.fieldnames:
                raise FixtureError(f"{path}: review CSV must have an 'id' column")
            rows = list(reader)
    except OSError as e:
        raise FixtureError(f"Could not read review CSV {path}: {e}") from e

    positions = {case.id: i for i, case in enumerate(fixture.cases)}
    summary = MergeSummary()

    for row in rows:
        case_id = (row.get("id") or "").strip()
        if not case_id:
            continue
        position = positions.get(case_id)
        if position is None:
            summary.warnings.append(f'CSV row "{case_id}" not found in fixture - skipped')
            continue

        original = fixture.cases[position]
        merged = _merge_row(original, row, summary.warnings)
        if merged is original:
            summary.unchanged += 1
        else:
            fixture.cases[position] = merged
            summary.updated += 1

    for warning in summary.warnings:
        logger.warning(warning)
    logger.info("Merged review CSV: %d updated, %d unchanged", summary.updated, summary.unchanged)
    return summary
