"""Tests for ReportWriter -- missing-track and eval report generation."""

from __future__ import annotations

import json
from pathlib import Path

from trackmatch.core.evaluation import run_evaluation
from trackmatch.core.matcher import match_all
from trackmatch.core.missing_tracks import missing_from_results
from trackmatch.core.report_writer import ReportWriter
from trackmatch.models.eval_case import EvalCase, FailureCategory, Verdict
from trackmatch.models.track import LocalTrack, StreamingTrack


def _run():
    streaming = [
        StreamingTrack(id="1", title="Strobe", artist="deadmau5", album="For Lack of a Better Name",
                       genre="progressive house", super_genre="Electronic"),
        StreamingTrack(id="2", title="Levels", artist="Avicii"),
        StreamingTrack(id="3", title="Song (Extended Mix)", artist="DJ X"),
    ]
    local = [LocalTrack(id="a", file_path="/m/song.mp3", title="Song", artist="DJ X")]
    results = match_all(streaming, local)
    return results, missing_from_results(results)


class TestWriteMissingReport:
    def test_generates_json_and_txt(self, tmp_path: Path):
        results, missing = _run()

        written = ReportWriter.write_missing_report(tmp_path, missing, results)

        json_path = tmp_path / "_missing_report.json"
        txt_path = tmp_path / "_missing_report.txt"
        assert written == [json_path, txt_path]

        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["stats"] == {"checked": 3, "exact": 0, "core": 1, "fuzzy": 0, "missing": 2}
        assert [m["id"] for m in data["missing"]] == ["1", "2"]
        assert data["missing"][0]["reason"] == "No matching local track found"

        text = txt_path.read_text(encoding="utf-8")
        assert "Missing Tracks (2)" in text
        assert "deadmau5 - Strobe" in text
        assert "Album: For Lack of a Better Name" in text

    def test_creates_output_dir(self, tmp_path: Path):
        results, missing = _run()
        out = tmp_path / "reports" / "nested"
        ReportWriter.write_missing_report(out, missing, results)
        assert (out / "_missing_report.json").exists()

    def test_no_missing_tracks(self, tmp_path: Path):
        ReportWriter.write_missing_report(tmp_path, [], [])
        text = (tmp_path / "_missing_report.txt").read_text(encoding="utf-8")
        assert "Missing locally:          0" in text
        assert "=== Missing Tracks" not in text


class TestWriteEvalReport:
    def test_generates_json_and_txt(self, tmp_path: Path):
        case = EvalCase(
            id="eval-001",
            streaming_track=StreamingTrack(id="sp1", title="Dont Stop", artist="The Beatles"),
            expected_local_match=LocalTrack(id="l1", file_path="/m/a.mp3", title="Don't Stop", artist="Beatles"),
            verdict=Verdict.FALSE_NEGATIVE,
            failure_category=FailureCategory.TITLE_PUNCTUATION,
        )
        report = run_evaluation([case])

        ReportWriter.write_eval_report(tmp_path, report, "unit")

        data = json.loads((tmp_path / "_eval_report.json").read_text(encoding="utf-8"))
        assert data["description"] == "unit"
        assert data["metrics"]["true_negatives"] == 1
        assert data["metrics"]["by_category"]["title-punctuation"]["matched"] == 1
        assert data["cases"][0]["result"]["tier"] == 1

        text = (tmp_path / "_eval_report.txt").read_text(encoding="utf-8")
        assert "Match recall: 100.0%" in text
