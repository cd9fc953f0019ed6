"""Tests for configuration loading and validation logic in main.py."""

from __future__ import annotations

from pathlib import Path

from trackmatch.main import load_config, validate_config
from trackmatch.models.config import AppConfig
from trackmatch.utils.constants import FUZZY_MATCH_THRESHOLD, MAX_FALSE_NEGATIVE_RATE


class TestValidateConfig:
    def test_valid_config_produces_no_warnings(self):
        config = {
            "fuzzy_threshold": 90,
            "max_false_negative_rate": 0.4,
            "trace_terms": ["daft punk"],
        }
        assert validate_config(config) == []
        assert config["fuzzy_threshold"] == 90

    def test_empty_config(self):
        assert validate_config({}) == []

    def test_threshold_out_of_range(self):
        config = {"fuzzy_threshold": 150}
        warnings = validate_config(config)
        assert any("fuzzy_threshold" in w for w in warnings)
        assert config["fuzzy_threshold"] == FUZZY_MATCH_THRESHOLD

    def test_threshold_wrong_type(self):
        config = {"fuzzy_threshold": "high"}
        assert validate_config(config)
        assert config["fuzzy_threshold"] == FUZZY_MATCH_THRESHOLD

    def test_threshold_bool_rejected(self):
        config = {"fuzzy_threshold": True}
        assert validate_config(config)
        assert config["fuzzy_threshold"] == FUZZY_MATCH_THRESHOLD

    def test_max_rate_out_of_range(self):
        config = {"max_false_negative_rate": 1.5}
        warnings = validate_config(config)
        assert any("max_false_negative_rate" in w for w in warnings)
        assert config["max_false_negative_rate"] == MAX_FALSE_NEGATIVE_RATE

    def test_trace_terms_not_a_list(self):
        config = {"trace_terms": "daft punk"}
        warnings = validate_config(config)
        assert any("trace_terms" in w for w in warnings)
        assert config["trace_terms"] == []

    def test_trace_terms_null(self):
        config = {"trace_terms": None}
        assert validate_config(config) == []
        assert config["trace_terms"] == []


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("fuzzy_threshold: 80\ntrace_terms:\n  - sandstorm\n", encoding="utf-8")
        assert load_config(path) == {"fuzzy_threshold": 80, "trace_terms": ["sandstorm"]}

    def test_missing_file(self, tmp_path: Path):
        assert load_config(tmp_path / "nope.yaml") == {}

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == {}

    def test_default_config_is_valid(self):
        config = load_config()
        assert validate_config(config) == []
        assert AppConfig.from_dict(config).fuzzy_threshold == FUZZY_MATCH_THRESHOLD


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.fuzzy_threshold == FUZZY_MATCH_THRESHOLD
        assert config.trace_terms == []
        assert config.report_dir_resolved is None

    def test_unknown_keys_ignored(self):
        config = AppConfig.from_dict({"fuzzy_threshold": 70, "acoustid_api_key": "x", "log_file": None})
        assert config.fuzzy_threshold == 70
        assert config.log_file is None

    def test_round_trip(self):
        config = AppConfig(fuzzy_threshold=75, trace_terms=["a"])
        assert AppConfig.from_dict(config.to_dict()) == config

    def test_report_dir_resolved(self, tmp_path: Path):
        config = AppConfig(report_dir=str(tmp_path))
        assert config.report_dir_resolved == tmp_path.resolve()
