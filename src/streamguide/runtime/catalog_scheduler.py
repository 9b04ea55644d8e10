"""
Catalog scheduling: turn a looping catalog of recorded videos into a full day.

The synthesis window is one day (WINDOW_SECONDS) starting at local midnight.
A cursor walks the catalog cyclically, each item occupying its own duration,
until the window is full; the last entry is cut at the window end. Entries are
contiguous: entry[i].till == entry[i + 1].since.

Deterministic given the clock and the id factory. Does not mutate inputs.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timedelta, tzinfo
from typing import Any

import structlog

from streamguide.infra.exceptions import (
    EmptyCatalogError,
    InvalidInputError,
    ZeroDurationCatalogError,
)
from streamguide.infra.settings import Settings, settings as default_settings
from streamguide.runtime.clock import GuideClock, MasterClock
from streamguide.runtime.duration import parse_duration
from streamguide.runtime.guide_types import CatalogItem, GuideEntry, fill_thumbnail
from streamguide.runtime.window import WINDOW_SECONDS, window_start

_log = structlog.get_logger(__name__)

IdFactory = Callable[[], str]


def _new_entry_id() -> str:
    return str(uuid.uuid4())


def _coerce_items(items: Sequence[CatalogItem | Mapping[str, Any]]) -> list[CatalogItem]:
    """Validate the catalog's shape and normalize records to CatalogItem."""
    if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Sequence):
        raise InvalidInputError(f"Catalog must be a sequence of items, got {type(items).__name__}")
    coerced: list[CatalogItem] = []
    for item in items:
        if isinstance(item, CatalogItem):
            coerced.append(item)
        elif isinstance(item, Mapping):
            coerced.append(CatalogItem.from_record(item))
        else:
            raise InvalidInputError(f"Catalog item must be a mapping, got {type(item).__name__}")
    return coerced


def _build_entry(
    item: CatalogItem,
    *,
    entry_id: str,
    category_id: str,
    since: datetime,
    till: datetime,
    genre: str | None,
    config: Settings,
) -> GuideEntry:
    return GuideEntry(
        entry_id=entry_id,
        category_id=category_id,
        since=since,
        till=till,
        title=item.title or config.placeholder_title,
        description=item.title or config.placeholder_title,
        image=fill_thumbnail(item.thumbnail_url, config.thumbnail_width, config.thumbnail_height),
        released=item.created_at,
        runtime=item.duration,
        genre=genre,
        author=item.author,
        language=item.language,
        source_id=item.source_id,
        year=str(since.year),
        country=config.guide_country,
    )


def synthesize_daily_schedule(
    items: Sequence[CatalogItem | Mapping[str, Any]],
    category_id: str,
    *,
    clock: GuideClock | None = None,
    tz: str | tzinfo | None = None,
    id_factory: IdFactory | None = None,
    genre: str | None = None,
    settings: Settings | None = None,
) -> list[GuideEntry]:
    """
    Fill one day with `items` repeated in order.

    Args:
        items: CatalogItems or upstream video records, in play order.
        category_id: Category the entries are listed under.
        clock: Source of "now"; the window is the local day containing it.
        tz: Timezone of the midnight boundary; defaults to settings.guide_timezone,
            then server local time.
        id_factory: Produces entry ids (default: uuid4 strings).
        genre: Display genre copied onto every entry (usually the channel title).
        settings: Overrides the module-level settings.

    Raises:
        InvalidInputError: `items` is not a sequence of records.
        EmptyCatalogError: `items` is empty.
        MalformedDurationError: an item has a missing or malformed duration.
        ZeroDurationCatalogError: no item has a positive duration.
    """
    config = settings or default_settings
    clock = clock or MasterClock()
    id_factory = id_factory or _new_entry_id
    zone = tz if tz is not None else config.guide_timezone

    catalog = _coerce_items(items)
    if not catalog:
        raise EmptyCatalogError(f"No catalog items to schedule for category {category_id!r}")

    # Parse everything up front: one bad item invalidates the whole day
    durations = [parse_duration(item.duration) for item in catalog]
    if not any(durations):
        raise ZeroDurationCatalogError(
            f"All {len(catalog)} catalog items for category {category_id!r} have zero duration"
        )

    start = window_start(clock.now_utc(), zone)
    schedule: list[GuideEntry] = []
    elapsed = 0
    i = 0
    while elapsed < WINDOW_SECONDS:
        index = i % len(catalog)
        i += 1
        duration = durations[index]
        if duration == 0:
            continue
        end = min(elapsed + duration, WINDOW_SECONDS)
        schedule.append(
            _build_entry(
                catalog[index],
                entry_id=id_factory(),
                category_id=category_id,
                since=start + timedelta(seconds=elapsed),
                till=start + timedelta(seconds=end),
                genre=genre,
                config=config,
            )
        )
        elapsed = end

    _log.info(
        "catalog_synthesized",
        category_id=category_id,
        catalog_size=len(catalog),
        entries=len(schedule),
        window_start=start.isoformat(),
    )
    return schedule
