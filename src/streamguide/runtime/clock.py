"""Clock abstractions used to anchor guide synthesis.

The clock supplies the "now" that a daily schedule is built around. Production
code reads the wall clock; tests inject a stepped clock so the synthesis
window and every timestamp derived from it are reproducible.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from threading import Lock
from typing import Protocol, runtime_checkable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from streamguide.infra.exceptions import InvalidInputError


@runtime_checkable
class GuideClock(Protocol):
    """Protocol implemented by clock providers."""

    def now_utc(self) -> datetime:
        """Return the current time as an aware UTC datetime."""


class MasterClock:
    """Wall-clock provider returning timezone-aware timestamps."""

    def now_utc(self) -> datetime:
        """Return current UTC time as an aware datetime."""
        return datetime.now(timezone.utc)


class SteppedClock:
    """Deterministic clock.

    Time advances only when :meth:`advance` is called. Used by tests, by the
    CLI `--now` option and to pin one instant across a multi-channel guide.
    """

    def __init__(self, start: datetime) -> None:
        ensure_aware(start)
        self._current = start.astimezone(timezone.utc)
        self._lock = Lock()

    def now_utc(self) -> datetime:
        with self._lock:
            return self._current

    def advance(self, seconds: float) -> datetime:
        """Advance the clock by ``seconds`` (must be non-negative)."""
        if seconds < 0.0:
            raise ValueError("seconds must be non-negative")
        with self._lock:
            self._current += timedelta(seconds=seconds)
            return self._current


def ensure_aware(dt: datetime) -> None:
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise InvalidInputError("Datetime must be timezone-aware")


def resolve_timezone(tz: str | tzinfo | None) -> tzinfo | None:
    """Resolve an IANA name or tzinfo.

    ``None`` or ``""`` resolves to None, meaning server local time; pass it to
    ``datetime.astimezone`` so the system offset is looked up per instant.
    """
    if not tz:
        return None
    if isinstance(tz, tzinfo):
        return tz
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidInputError(f"Unknown timezone: {tz!r}") from e
