"""
EPG aggregation: one synthesized day per guide channel, merged into one list.

Channels are processed in directory order; each channel's catalog is looped
with the channel title as genre. Only entries starting on the current local
date are kept. A failure on any channel aborts the whole guide.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import tzinfo
from typing import Any

import structlog

from streamguide.infra.exceptions import InvalidInputError
from streamguide.infra.settings import Settings, settings as default_settings
from streamguide.runtime.catalog_scheduler import synthesize_daily_schedule
from streamguide.runtime.channels import ChannelDirectory
from streamguide.runtime.clock import GuideClock, MasterClock, SteppedClock
from streamguide.runtime.guide_types import CatalogItem, GuideEntry
from streamguide.runtime.window import same_local_day

_log = structlog.get_logger(__name__)

Catalog = Sequence[CatalogItem | Mapping[str, Any]]


def build_epg(
    catalogs: Mapping[str, Catalog],
    directory: ChannelDirectory,
    *,
    clock: GuideClock | None = None,
    tz: str | tzinfo | None = None,
    id_factory: Callable[[], str] | None = None,
    settings: Settings | None = None,
) -> list[GuideEntry]:
    """
    Build today's guide for every channel that has a catalog.

    Args:
        catalogs: Catalog per channel uuid (category id).
        directory: Resolves channel titles; also fixes the channel order.

    Raises:
        InvalidInputError: a catalog is keyed by a uuid the directory does not know.
        ScheduleError / MalformedDurationError: propagated from the channel that failed.
    """
    config = settings or default_settings
    clock = clock or MasterClock()
    zone = tz if tz is not None else config.guide_timezone

    known = {channel.uuid for channel in directory.list_channels()}
    unknown = sorted(set(catalogs) - known)
    if unknown:
        raise InvalidInputError(f"Unknown channel(s): {', '.join(unknown)}")

    # One instant for every channel and for the "today" filter
    now = clock.now_utc()
    pinned = SteppedClock(now)
    epg: list[GuideEntry] = []
    for channel in directory.list_channels():
        if channel.uuid not in catalogs:
            continue
        schedule = synthesize_daily_schedule(
            catalogs[channel.uuid],
            channel.uuid,
            clock=pinned,
            tz=zone,
            id_factory=id_factory,
            genre=channel.title,
            settings=config,
        )
        _log.debug("channel_scheduled", channel=channel.title, entries=len(schedule))
        epg.extend(schedule)

    today = [entry for entry in epg if same_local_day(entry.since, now, zone)]
    _log.info("epg_built", channels=len(catalogs), entries=len(today))
    return today
