"""Typed configuration model for Track Match.

All configuration values have explicit types, defaults, and documentation.
The raw ``dict`` from ``config.yaml`` is validated first (see
``trackmatch.main.validate_config``) and then turned into an ``AppConfig``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path

from trackmatch.utils.constants import FUZZY_MATCH_THRESHOLD, MAX_FALSE_NEGATIVE_RATE


@dataclass
class AppConfig:
    """Strongly-typed configuration for the Track Match application.

    Attributes:
        fuzzy_threshold: Minimum similarity (0-100) for a tier-3 match.
        max_false_negative_rate: Eval ratchet (0-1). Only ever tightened.
        trace_terms: Title/artist substrings whose matching is traced at
            DEBUG level. Empty disables tracing.
        report_dir: Directory for missing/eval reports. Empty disables
            report files.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file (None = console only).
    """

    # --- Matching ---
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD

    # --- Evaluation ---
    max_false_negative_rate: float = MAX_FALSE_NEGATIVE_RATE

    # --- Diagnostics ---
    trace_terms: list[str] = field(default_factory=list)

    # --- Output ---
    report_dir: str = ""

    # --- Logging ---
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> AppConfig:
        """Create an AppConfig from a raw dictionary (e.g., from YAML).

        Unknown keys are silently ignored so YAML files with extra keys
        don't break older code.

        Args:
            data: Dictionary of configuration values.

        Returns:
            Populated AppConfig instance.
        """
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known_fields and v is not None}
        return cls(**filtered)

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def report_dir_resolved(self) -> Path | None:
        """Return the report_dir as a resolved Path, or None if not set."""
        if not self.report_dir:
            return None
        return Path(self.report_dir).expanduser().resolve()
