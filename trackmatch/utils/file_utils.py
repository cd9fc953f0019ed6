"""Path helpers for the local scanner."""

from __future__ import annotations

from pathlib import Path

from trackmatch.utils.constants import SUPPORTED_EXTENSIONS


def is_audio_file(path: Path | str) -> bool:
    """Check whether a path has a supported audio extension (case-insensitive)."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def strip_audio_extension(filename: str) -> str:
    """Remove a supported audio extension from a filename.

    Used as the title fallback for files without a title tag. Names with
    any other extension are returned unchanged.

    Args:
        filename: Bare filename (no directory part).

    Returns:
        The filename without its audio extension.
    """
    lower = filename.lower()
    for ext in SUPPORTED_EXTENSIONS:
        if lower.endswith(ext):
            return filename[: -len(ext)]
    return filename


def relative_track_id(path: Path, root: Path) -> str:
    """Build a stable identifier for a file from its path below the scan root.

    Falls back to the absolute path when ``path`` is not under ``root``.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
