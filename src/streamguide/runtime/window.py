"""
Synthesis window math: the broadcast day a catalog schedule fills.

Pure functions. The window starts at local midnight of the supplied instant
and lasts exactly WINDOW_SECONDS of absolute time, so a DST change inside the
day shifts the local end time but never the window length.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone, tzinfo

from streamguide.runtime.clock import ensure_aware, resolve_timezone

WINDOW_SECONDS = 86400


def window_start(now: datetime, tz: str | tzinfo | None = None) -> datetime:
    """Local midnight of the day containing `now`, returned in UTC.

    Args:
        now: Aware instant the schedule is built around.
        tz: IANA name or tzinfo for "local"; empty means server local time.

    Returns:
        Aware UTC datetime of the window start.
    """
    ensure_aware(now)
    zone = resolve_timezone(tz)
    if zone is None:
        # Naive local midnight takes the offset in effect at midnight, not at `now`
        midnight = datetime.combine(now.astimezone().date(), time.min).astimezone()
    else:
        midnight = datetime.combine(now.astimezone(zone).date(), time.min, tzinfo=zone)
    return midnight.astimezone(timezone.utc)


def window_end(now: datetime, tz: str | tzinfo | None = None) -> datetime:
    """Exclusive end of the window: window_start(now) + WINDOW_SECONDS."""
    return window_start(now, tz) + timedelta(seconds=WINDOW_SECONDS)


def same_local_day(a: datetime, b: datetime, tz: str | tzinfo | None = None) -> bool:
    """True when both instants fall on the same calendar date in `tz`."""
    ensure_aware(a)
    ensure_aware(b)
    zone = resolve_timezone(tz)
    return a.astimezone(zone).date() == b.astimezone(zone).date()
