"""
streamguide - TV-guide schedule assembly for live-streaming metadata.

Turns recorded-video catalogs into gapless daily schedules and merges
overlapping broadcaster schedules into a single timeline.
"""

from streamguide.runtime.catalog_scheduler import synthesize_daily_schedule
from streamguide.runtime.duration import format_duration, parse_duration
from streamguide.runtime.epg import build_epg
from streamguide.runtime.guide_types import CatalogItem, GuideEntry, LiveSegment
from streamguide.runtime.live_reconciler import reconcile_live_segments

__all__ = [
    "CatalogItem",
    "GuideEntry",
    "LiveSegment",
    "build_epg",
    "format_duration",
    "parse_duration",
    "reconcile_live_segments",
    "synthesize_daily_schedule",
]
