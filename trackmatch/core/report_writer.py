"""Missing-track and eval report generation."""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Sequence

from trackmatch.core.evaluation import EvalReport, format_eval_report
from trackmatch.models.match_result import MatchResult, MissingTrack
from trackmatch.utils.constants import (
    EVAL_REPORT_BASENAME,
    MISSING_REPORT_BASENAME,
    MISSING_REPORT_TITLE,
)
from trackmatch.utils.logger import get_logger

logger = get_logger("core.report_writer")


def _write_text(path: Path, content: str, label: str) -> bool:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write %s: %s", label, e)
        return False
    logger.info("%s written to: %s", label, path)
    return True


class ReportWriter:
    """Generates JSON/TXT reports for missing-track and eval runs."""

    @staticmethod
    def write_missing_report(
        output_dir: Path,
        missing: Sequence[MissingTrack],
        results: Sequence[MatchResult],
    ) -> list[Path]:
        """Write a report of streaming tracks with no local counterpart.

        Generates two files in ``output_dir``:
        - _missing_report.json  -- machine-readable
        - _missing_report.txt   -- human-readable summary

        Args:
            output_dir: Directory for the report files (created if needed).
            missing: Missing tracks from the run.
            results: Every match result from the run, for tier statistics.

        Returns:
            Paths of the files that were written.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        tiers = Counter(r.tier_label for r in results)

        stats = {
            "checked": len(results),
            "exact": tiers["exact"],
            "core": tiers["core"],
            "fuzzy": tiers["fuzzy"],
            "missing": len(missing),
        }

        # --- JSON report (machine-readable) ---
        report_data = {
            "generated_at": timestamp,
            "stats": stats,
            "missing": [
                {**m.streaming_track.to_dict(), "reason": m.reason}
                for m in missing
            ],
        }

        written = []
        json_path = output_dir / f"{MISSING_REPORT_BASENAME}.json"
        if _write_text(json_path, json.dumps(report_data, indent=2, ensure_ascii=False), "Missing report (JSON)"):
            written.append(json_path)

        # --- Text report (human-readable) ---
        lines = [
            MISSING_REPORT_TITLE,
            f"Generated: {timestamp}",
            "",
            "=== Summary ===",
            f"  Streaming tracks checked: {stats['checked']}",
            f"  Exact matches:            {stats['exact']}",
            f"  Core-title matches:       {stats['core']}",
            f"  Fuzzy matches:            {stats['fuzzy']}",
            f"  Missing locally:          {stats['missing']}",
            "",
        ]

        if missing:
            lines.append(f"=== Missing Tracks ({len(missing)}) ===")
            lines.append("")
            for m in missing:
                track = m.streaming_track
                lines.append(f"  {track.display_label}")
                if track.album:
                    lines.append(f"    Album: {track.album}")
                if track.genre or track.super_genre:
                    lines.append(f"    Genre: {track.genre or '?'} ({track.super_genre or '?'})")
                lines.append("")

        txt_path = output_dir / f"{MISSING_REPORT_BASENAME}.txt"
        if _write_text(txt_path, "\n".join(lines), "Missing report (TXT)"):
            written.append(txt_path)
        return written

    @staticmethod
    def write_eval_report(
        output_dir: Path,
        report: EvalReport,
        description: str = "",
    ) -> list[Path]:
        """Write eval metrics and per-case outcomes.

        Generates ``_eval_report.json`` and ``_eval_report.txt`` in
        ``output_dir``.

        Returns:
            Paths of the files that were written.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        report_data = {
            "generated_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "description": description,
            "metrics": report.metrics.to_dict(),
            "cases": [
                {
                    "id": o.case.id,
                    "verdict": o.case.verdict.value,
                    "failure_category": o.case.failure_category.value if o.case.failure_category else None,
                    "result": o.result.to_dict(),
                }
                for o in report.outcomes
            ],
        }

        written = []
        json_path = output_dir / f"{EVAL_REPORT_BASENAME}.json"
        if _write_text(json_path, json.dumps(report_data, indent=2, ensure_ascii=False), "Eval report (JSON)"):
            written.append(json_path)

        txt_path = output_dir / f"{EVAL_REPORT_BASENAME}.txt"
        if _write_text(txt_path, "\n".join(format_eval_report(report, description)), "Eval report (TXT)"):
            written.append(txt_path)
        return written
