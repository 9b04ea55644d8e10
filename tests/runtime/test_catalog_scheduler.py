"""
Catalog scheduler tests.

Fixed clock and id factory: the synthesis window is 2025-01-15 00:00 UTC
plus 86400 seconds.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from streamguide.infra.exceptions import (
    EmptyCatalogError,
    InvalidInputError,
    MalformedDurationError,
    ZeroDurationCatalogError,
)
from streamguide.runtime.catalog_scheduler import synthesize_daily_schedule
from streamguide.runtime.clock import SteppedClock
from streamguide.runtime.guide_types import CatalogItem

DAY_START = datetime(2025, 1, 15, 0, 0, 0, tzinfo=timezone.utc)
DAY_END = DAY_START + timedelta(seconds=86400)


def _synthesize(items, clock, id_factory, guide_settings, **kwargs):
    return synthesize_daily_schedule(
        items, "509658", clock=clock, id_factory=id_factory, settings=guide_settings, **kwargs
    )


def test_schedule_fills_exactly_one_day(sample_videos, clock, id_factory, guide_settings):
    schedule = _synthesize(sample_videos, clock, id_factory, guide_settings)

    assert schedule[0].since == DAY_START
    assert schedule[-1].till == DAY_END
    assert sum(entry.duration_seconds for entry in schedule) == 86400


def test_entries_are_contiguous(sample_videos, clock, id_factory, guide_settings):
    schedule = _synthesize(sample_videos, clock, id_factory, guide_settings)

    for prev, nxt in zip(schedule, schedule[1:]):
        assert prev.till == nxt.since
    assert all(entry.since < entry.till for entry in schedule)


def test_catalog_loops_in_order(sample_videos, clock, id_factory, guide_settings):
    schedule = _synthesize(sample_videos, clock, id_factory, guide_settings)

    ids = [entry.source_id for entry in schedule[:7]]
    assert ids == ["2001", "2002", "2003", "2001", "2002", "2003", "2001"]


def test_last_entry_is_truncated_at_window_end(clock, id_factory, guide_settings):
    """7h items: 3 full plays (21h), the 4th is cut to 3h."""
    schedule = _synthesize([{"id": "a", "duration": "7h"}], clock, id_factory, guide_settings)

    assert len(schedule) == 4
    assert schedule[-1].since == DAY_START + timedelta(hours=21)
    assert schedule[-1].till == DAY_END
    assert schedule[-1].runtime == "7h"


def test_single_item_longer_than_a_day(clock, id_factory, guide_settings):
    schedule = _synthesize([{"id": "a", "duration": "30h"}], clock, id_factory, guide_settings)

    assert len(schedule) == 1
    assert schedule[0].since == DAY_START
    assert schedule[0].till == DAY_END


def test_exact_fit_emits_no_trailing_entry(clock, id_factory, guide_settings):
    schedule = _synthesize([{"id": "a", "duration": "8h"}], clock, id_factory, guide_settings)

    assert len(schedule) == 3
    assert schedule[-1].till == DAY_END


def test_entry_metadata(sample_videos, clock, id_factory, guide_settings):
    schedule = _synthesize(sample_videos, clock, id_factory, guide_settings, genre="Speedrunning")
    first, second = schedule[0], schedule[1]

    assert first.entry_id == "entry-1"
    assert first.category_id == "509658"
    assert first.title == "Any% world record attempts"
    assert first.description == "Any% world record attempts"
    assert first.image == "https://static.example.tv/thumb/2001-1066x600.jpg"
    assert first.released == "2025-01-10T18:00:00Z"
    assert first.runtime == "3h0m0s"
    assert first.author == "speedrunner"
    assert first.language == "en"
    assert first.genre == "Speedrunning"
    assert first.year == "2025"
    assert first.country == "United States"

    # Empty title -> placeholder; created_at missing -> published_at
    assert second.title == "No description available"
    assert second.released == "2025-01-11T09:30:00Z"
    assert second.image == ""


def test_ids_come_from_factory(sample_videos, clock, id_factory, guide_settings):
    schedule = _synthesize(sample_videos, clock, id_factory, guide_settings)

    assert [entry.entry_id for entry in schedule[:3]] == ["entry-1", "entry-2", "entry-3"]
    assert len({entry.entry_id for entry in schedule}) == len(schedule)


def test_default_ids_are_unique(sample_videos, clock, guide_settings):
    schedule = synthesize_daily_schedule(sample_videos, "509658", clock=clock, settings=guide_settings)

    assert len({entry.entry_id for entry in schedule}) == len(schedule)


def test_idempotent_with_fixed_clock_and_ids(sample_videos, guide_settings):
    def run():
        counter = iter(range(1000))
        return synthesize_daily_schedule(
            sample_videos,
            "509658",
            clock=SteppedClock(datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)),
            id_factory=lambda: f"id-{next(counter)}",
            settings=guide_settings,
        )

    assert run() == run()


def test_window_anchored_to_local_midnight(sample_videos, id_factory, guide_settings):
    """02:00 UTC on Jan 15 is still Jan 14 in New York (UTC-5)."""
    clock = SteppedClock(datetime(2025, 1, 15, 2, 0, tzinfo=timezone.utc))
    schedule = synthesize_daily_schedule(
        sample_videos, "509658", clock=clock, tz="America/New_York",
        id_factory=id_factory, settings=guide_settings,
    )

    expected = datetime(2025, 1, 14, 0, 0, tzinfo=ZoneInfo("America/New_York"))
    assert schedule[0].since == expected
    assert schedule[-1].till == expected + timedelta(seconds=86400)


def test_timezone_falls_back_to_settings(sample_videos, id_factory, guide_settings):
    clock = SteppedClock(datetime(2025, 1, 15, 2, 0, tzinfo=timezone.utc))
    tokyo = guide_settings.model_copy(update={"guide_timezone": "Asia/Tokyo"})
    schedule = synthesize_daily_schedule(
        sample_videos, "509658", clock=clock, id_factory=id_factory, settings=tokyo
    )

    # 02:00 UTC = 11:00 JST on Jan 15 -> midnight JST = Jan 14 15:00 UTC
    assert schedule[0].since == datetime(2025, 1, 14, 15, 0, tzinfo=timezone.utc)


def test_server_local_midnight_on_spring_forward_day(new_york_server_time, sample_videos, id_factory, guide_settings):
    clock = SteppedClock(datetime(2025, 3, 9, 19, 0, tzinfo=timezone.utc))
    server_local = guide_settings.model_copy(update={"guide_timezone": ""})
    schedule = synthesize_daily_schedule(
        sample_videos, "509658", clock=clock, id_factory=id_factory, settings=server_local
    )

    first = schedule[0].since.astimezone()
    assert (first.date().isoformat(), first.hour, first.minute) == ("2025-03-09", 0, 0)
    assert schedule[0].since == datetime(2025, 3, 9, 5, 0, tzinfo=timezone.utc)
    assert schedule[-1].till - schedule[0].since == timedelta(seconds=86400)


def test_accepts_catalog_items(clock, id_factory, guide_settings):
    items = [CatalogItem(duration="12h", title="Half day", source_id="x")]
    schedule = _synthesize(items, clock, id_factory, guide_settings)

    assert [entry.title for entry in schedule] == ["Half day", "Half day"]


def test_thumbnail_size_comes_from_settings(sample_videos, clock, id_factory, guide_settings):
    small = guide_settings.model_copy(update={"thumbnail_width": 320, "thumbnail_height": 180})
    schedule = _synthesize(sample_videos, clock, id_factory, small)

    assert schedule[0].image == "https://static.example.tv/thumb/2001-320x180.jpg"


def test_zero_duration_items_are_skipped_when_others_play(clock, id_factory, guide_settings):
    items = [{"id": "z", "duration": "0s"}, {"id": "a", "duration": "6h"}]
    schedule = _synthesize(items, clock, id_factory, guide_settings)

    assert [entry.source_id for entry in schedule] == ["a", "a", "a", "a"]
    assert all(entry.since < entry.till for entry in schedule)


def test_empty_catalog_fails(clock, id_factory, guide_settings):
    with pytest.raises(EmptyCatalogError):
        synthesize_daily_schedule([], "cat1", clock=clock, id_factory=id_factory, settings=guide_settings)


def test_zero_duration_catalog_fails(clock, id_factory, guide_settings):
    with pytest.raises(ZeroDurationCatalogError):
        synthesize_daily_schedule(
            [{"duration": "0s", "title": "x"}], "cat1",
            clock=clock, id_factory=id_factory, settings=guide_settings,
        )


def test_missing_duration_fails(clock, id_factory, guide_settings):
    items = [{"id": "a", "duration": "1h"}, {"id": "b", "title": "no duration"}]
    with pytest.raises(MalformedDurationError):
        _synthesize(items, clock, id_factory, guide_settings)


def test_malformed_duration_fails_even_if_never_reached(clock, id_factory, guide_settings):
    """A 24h first item fills the day, but a bad later item still fails the whole run."""
    items = [{"id": "a", "duration": "24h"}, {"id": "b", "duration": "soon"}]
    with pytest.raises(MalformedDurationError):
        _synthesize(items, clock, id_factory, guide_settings)


@pytest.mark.parametrize("items", [None, "1h", {"duration": "1h"}, 42])
def test_non_sequence_catalog_fails(items, clock, id_factory, guide_settings):
    with pytest.raises(InvalidInputError):
        _synthesize(items, clock, id_factory, guide_settings)


def test_non_mapping_item_fails(clock, id_factory, guide_settings):
    with pytest.raises(InvalidInputError):
        _synthesize(["1h"], clock, id_factory, guide_settings)


def test_non_string_duration_fails(clock, id_factory, guide_settings):
    with pytest.raises(InvalidInputError):
        _synthesize([{"duration": 3600}], clock, id_factory, guide_settings)


def test_inputs_are_not_mutated(sample_videos, clock, id_factory, guide_settings):
    before = [dict(video) for video in sample_videos]
    _synthesize(sample_videos, clock, id_factory, guide_settings)

    assert sample_videos == before
