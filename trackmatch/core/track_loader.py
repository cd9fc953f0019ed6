"""Loading of streaming and local catalogs from JSON exports.

Both loaders accept either a JSON array of track records or an object with
a ``tracks`` array. Records use snake_case keys (``id``, ``title``,
``artist``, ``primary_artist``, ...).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, TypeVar

from trackmatch.exceptions import TrackLoadError
from trackmatch.models.track import LocalTrack, StreamingTrack
from trackmatch.utils.logger import get_logger

logger = get_logger("core.track_loader")

T = TypeVar("T")


def _read_records(path: Path) -> list[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise TrackLoadError(f"Track file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise TrackLoadError(f"Could not read track file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("tracks")
    if not isinstance(data, list):
        raise TrackLoadError(f"{path}: expected a list of tracks or an object with 'tracks'")
    return data


def _load(path: Path | str, factory: Callable[[dict], T], kind: str) -> list[T]:
    path = Path(path)
    tracks = []
    for index, record in enumerate(_read_records(path)):
        if not isinstance(record, dict):
            raise TrackLoadError(f"{path}: {kind} track #{index} is not an object")
        try:
            tracks.append(factory(record))
        except KeyError as e:
            raise TrackLoadError(f"{path}: {kind} track #{index} is missing {e}") from e
    logger.info("Loaded %d %s tracks from %s", len(tracks), kind, path)
    return tracks


def load_streaming_tracks(path: Path | str) -> list[StreamingTrack]:
    """Load the streaming library export.

    Raises:
        TrackLoadError: If the file is missing, not JSON, or malformed.
    """
    return _load(path, StreamingTrack.from_dict, "streaming")


def load_local_tracks(path: Path | str) -> list[LocalTrack]:
    """Load a previously exported local collection.

    Raises:
        TrackLoadError: If the file is missing, not JSON, or malformed.
    """
    return _load(path, LocalTrack.from_dict, "local")


def save_local_tracks(tracks: list[LocalTrack], path: Path | str) -> None:
    """Write local tracks as a JSON array, readable by ``load_local_tracks``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps([t.to_dict() for t in tracks], indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("Wrote %d local tracks to %s", len(tracks), path)
