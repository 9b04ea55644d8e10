"""
Global test configuration for streamguide.

This module provides global pytest configuration and fixtures.
"""

import itertools
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the project src directory is importable without relying on external environment.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from streamguide.infra.settings import Settings
from streamguide.runtime.clock import SteppedClock

# Fixed instant for reproducible windows: 2025-01-15 14:30 UTC
FIXED_NOW = datetime(2025, 1, 15, 14, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return SteppedClock(FIXED_NOW)


@pytest.fixture
def id_factory():
    """Deterministic entry ids: entry-1, entry-2, ..."""
    counter = itertools.count(1)
    return lambda: f"entry-{next(counter)}"


@pytest.fixture
def guide_settings():
    """Settings pinned to UTC and independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        guide_timezone="UTC",
        thumbnail_width=1066,
        thumbnail_height=600,
        placeholder_title="No description available",
        guide_country="United States",
    )


@pytest.fixture
def new_york_server_time(monkeypatch):
    """Run with the process local time set to US Eastern (POSIX rule, no tz database needed)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def sample_videos():
    """Upstream video records as returned by the platform's videos endpoint."""
    return [
        {
            "id": "2001",
            "user_login": "speedrunner",
            "title": "Any% world record attempts",
            "created_at": "2025-01-10T18:00:00Z",
            "published_at": "2025-01-10T18:00:00Z",
            "language": "en",
            "thumbnail_url": "https://static.example.tv/thumb/2001-%{width}x%{height}.jpg",
            "duration": "3h0m0s",
        },
        {
            "id": "2002",
            "user_login": "chillstreams",
            "title": "",
            "published_at": "2025-01-11T09:30:00Z",
            "language": "de",
            "thumbnail_url": "",
            "duration": "1h30m",
        },
        {
            "id": "2003",
            "user_login": "retroplays",
            "title": "Late night retro",
            "created_at": "2025-01-12T23:00:00Z",
            "language": "en",
            "thumbnail_url": "https://static.example.tv/thumb/2003-%{width}x%{height}.jpg",
            "duration": "45m20s",
        },
    ]
