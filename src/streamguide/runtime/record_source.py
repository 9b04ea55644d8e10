"""
Record sources: where already-fetched upstream records come from.

The HTTP client for the streaming platform lives outside this package; it
plugs in by implementing RecordSource. JsonSnapshotRecordSource serves
payloads saved to disk, which is what the CLI and tests use.

Snapshot layout::

    <root>/videos/<category_id>.json        list of video records
    <root>/schedules/<broadcaster_id>.json  {"segments": [...]} schedule payload
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

import structlog

from streamguide.infra.exceptions import InvalidInputError
from streamguide.runtime.guide_types import LiveSegment, live_segments_from_schedule

_log = structlog.get_logger(__name__)


class RecordSource(Protocol):
    """Protocol for fetching raw upstream records."""

    def fetch_videos(self, category_id: str) -> list[dict[str, Any]]:
        """Video records for a category, in upstream order."""
        ...

    def fetch_schedule(self, broadcaster_id: str) -> dict[str, Any] | None:
        """Schedule payload (``{"segments": [...]}``) for a broadcaster, or None."""
        ...


class JsonSnapshotRecordSource:
    """RecordSource reading upstream payloads saved as JSON files."""

    def __init__(self, root: Path | str):
        self._root = Path(root)

    def _read(self, path: Path) -> Any:
        if not path.is_file():
            _log.debug("snapshot_missing", path=str(path))
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Invalid JSON in {path}: {e}") from e

    def fetch_videos(self, category_id: str) -> list[dict[str, Any]]:
        data = self._read(self._root / "videos" / f"{category_id}.json")
        if data is None:
            return []
        # Accept both the bare list and the upstream {"data": [...]} envelope
        if isinstance(data, dict):
            data = data.get("data", [])
        if not isinstance(data, list):
            raise InvalidInputError(f"Video snapshot for {category_id!r} is not a list")
        return data

    def fetch_schedule(self, broadcaster_id: str) -> dict[str, Any] | None:
        data = self._read(self._root / "schedules" / f"{broadcaster_id}.json")
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        return data

    def list_broadcaster_ids(self) -> list[str]:
        """Broadcaster ids that have a schedule snapshot, sorted."""
        schedules = self._root / "schedules"
        if not schedules.is_dir():
            return []
        return sorted(path.stem for path in schedules.glob("*.json"))


def collect_live_segments(source: RecordSource, broadcaster_ids: Iterable[str]) -> list[LiveSegment]:
    """Flatten every broadcaster's schedule into one unordered LiveSegment list."""
    segments: list[LiveSegment] = []
    for broadcaster_id in broadcaster_ids:
        payload = source.fetch_schedule(broadcaster_id)
        segments.extend(live_segments_from_schedule(broadcaster_id, payload))
    return segments
