"""
Duration tokens: compact "1h2m3s" strings as reported for recorded videos.

Grammar: optional ``<n>h``, then optional ``<n>m``, then optional ``<n>s``,
nothing else. Every component may be absent; the empty token is zero.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from streamguide.infra.exceptions import InvalidInputError, MalformedDurationError

_TOKEN_RE = re.compile(r"(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?", re.ASCII)


def parse_duration(token: str) -> int:
    """Return the total number of seconds encoded by `token`.

    Raises:
        InvalidInputError: `token` is not a string.
        MalformedDurationError: `token` does not match the grammar.
    """
    if not isinstance(token, str):
        raise InvalidInputError(f"Duration must be a string, got {type(token).__name__}")

    match = _TOKEN_RE.fullmatch(token)
    if match is None:
        raise MalformedDurationError(f"Malformed duration: {token!r}")

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def total_duration(tokens: Iterable[str]) -> int:
    """Sum of the durations of `tokens`, in seconds."""
    return sum(parse_duration(token) for token in tokens)


def format_duration(total_seconds: int) -> str:
    """Render seconds as HH:MM:SS (hours are not wrapped at 24)."""
    if isinstance(total_seconds, bool) or not isinstance(total_seconds, int):
        raise InvalidInputError("Seconds must be an integer")
    if total_seconds < 0:
        raise InvalidInputError("Seconds must be non-negative")
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
