"""
Live-segment reconciliation: independent broadcaster schedules -> one timeline.

Segments are stably sorted by start and swept once. When a segment starts
before the previous kept segment ends, its start is clamped forward to that
end: the earlier-starting segment keeps the contested interval. Exact
duplicates of the previous segment are discarded, and so are segments the
clamp leaves empty (fully covered by the previous segment).

Deterministic, no mutation: clamped segments are new objects.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from datetime import datetime

import structlog

from streamguide.infra.exceptions import InvalidInputError
from streamguide.runtime.guide_types import LiveSegment, parse_timestamp

_log = structlog.get_logger(__name__)


def _validate(segments: Sequence[LiveSegment]) -> list[LiveSegment]:
    if isinstance(segments, (str, bytes)) or not isinstance(segments, Sequence):
        raise InvalidInputError(
            f"Segments must be a sequence of LiveSegment, got {type(segments).__name__}"
        )
    for segment in segments:
        if not isinstance(segment, LiveSegment):
            raise InvalidInputError(
                f"Expected LiveSegment, got {type(segment).__name__}"
            )
    return list(segments)


def _within(
    segment: LiveSegment, since: datetime | None, till: datetime | None
) -> bool:
    if since is not None and segment.start < since:
        return False
    if till is not None and segment.end > till:
        return False
    return True


def reconcile_live_segments(
    segments: Sequence[LiveSegment],
    *,
    since: datetime | str | None = None,
    till: datetime | str | None = None,
) -> list[LiveSegment]:
    """
    Produce a sorted, non-overlapping timeline from `segments`.

    Args:
        segments: LiveSegments in any order, possibly overlapping.
        since: When given, segments starting before it are left out.
        till: When given, segments ending after it are left out.

    Returns:
        New list where every adjacent pair satisfies prev.end <= next.start.

    Raises:
        InvalidInputError: an element is not a LiveSegment, or since/till
            cannot be parsed.
    """
    candidates = _validate(segments)
    window_since = parse_timestamp(since) if since is not None else None
    window_till = parse_timestamp(till) if till is not None else None
    if window_since is not None or window_till is not None:
        candidates = [s for s in candidates if _within(s, window_since, window_till)]

    # sorted() is stable: equal starts keep their input order
    ordered = sorted(candidates, key=lambda s: s.start)

    timeline: list[LiveSegment] = []
    dropped = 0
    for segment in ordered:
        if not timeline:
            timeline.append(segment)
            continue

        last = timeline[-1]
        if segment.start < last.end:
            if segment.end <= last.end:
                # Nothing left after the clamp
                _log.debug(
                    "live_segment_dropped",
                    segment_id=segment.segment_id,
                    broadcaster_id=segment.broadcaster_id,
                    covered_by=last.segment_id,
                )
                dropped += 1
                continue
            segment = dataclasses.replace(segment, start=last.end)

        if segment.interval == last.interval:
            dropped += 1
            continue
        timeline.append(segment)

    _log.info(
        "live_segments_reconciled",
        received=len(segments),
        kept=len(timeline),
        dropped=dropped,
    )
    return timeline
