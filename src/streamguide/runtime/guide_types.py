"""
Guide data types and the upstream-record mapping into them.

No persistence or network dependencies. Upstream records are plain mappings
(already fetched and JSON-decoded); each type owns an explicit rename map so
the output schema never depends on whatever extra keys the upstream sent.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from streamguide.infra.exceptions import InvalidInputError, MalformedDurationError

# Upstream video record key -> CatalogItem field
CATALOG_ITEM_FIELDS: dict[str, str] = {
    "id": "source_id",
    "title": "title",
    "user_login": "author",
    "language": "language",
    "thumbnail_url": "thumbnail_url",
}

# Upstream schedule segment key -> LiveSegment field
LIVE_SEGMENT_FIELDS: dict[str, str] = {
    "id": "segment_id",
    "title": "title",
    "is_recurring": "is_recurring",
}


def to_iso_z(dt: datetime) -> str:
    """ISO-8601 UTC timestamp with a ``Z`` suffix."""
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidInputError(f"Invalid timestamp: {value!r}") from e
    else:
        raise InvalidInputError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def fill_thumbnail(url: str | None, width: int, height: int) -> str | None:
    """Substitute the width/height template placeholders of an upstream thumbnail URL."""
    if not url:
        return url
    return (
        url.replace("%{width}", str(width))
        .replace("%{height}", str(height))
        .replace("{width}", str(width))
        .replace("{height}", str(height))
    )


@dataclass(frozen=True)
class CatalogItem:
    """One recorded video, looped to fill a schedule."""

    duration: str
    title: str | None = None
    source_id: str | None = None
    created_at: str | None = None
    author: str | None = None
    language: str | None = None
    thumbnail_url: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> CatalogItem:
        """Build from an upstream video record.

        Raises:
            InvalidInputError: `record` is not a mapping.
            MalformedDurationError: the record carries no duration.
        """
        if not isinstance(record, Mapping):
            raise InvalidInputError(f"Catalog record must be a mapping, got {type(record).__name__}")
        duration = record.get("duration")
        if duration is None or duration == "":
            raise MalformedDurationError(
                f"Catalog record {record.get('id', '<unknown>')!r} has no duration"
            )
        fields = {field: record.get(key) for key, field in CATALOG_ITEM_FIELDS.items()}
        if fields["source_id"] is not None:
            fields["source_id"] = str(fields["source_id"])
        return cls(
            duration=duration,
            created_at=record.get("created_at") or record.get("published_at"),
            **fields,
        )


@dataclass(frozen=True)
class GuideEntry:
    """One synthesized program listing. `since` < `till`, both aware."""

    entry_id: str
    category_id: str
    since: datetime
    till: datetime
    title: str
    description: str
    image: str | None = None
    released: str | None = None
    runtime: str | None = None
    genre: str | None = None
    author: str | None = None
    language: str | None = None
    source_id: str | None = None
    year: str | None = None
    country: str | None = None

    @property
    def duration_seconds(self) -> int:
        return int((self.till - self.since).total_seconds())

    def to_dict(self) -> dict[str, Any]:
        """Client JSON shape (movie-style listing expected by the guide UI)."""
        return {
            "id": self.entry_id,
            "description": self.description,
            "title": self.title,
            "since": to_iso_z(self.since),
            "till": to_iso_z(self.till),
            "channelUuid": self.category_id,
            "image": self.image,
            "country": self.country,
            "Year": self.year,
            "Rated": 0,
            "Released": self.released,
            "Runtime": self.runtime,
            "Genre": self.genre,
            "Director": self.author,
            "Writer": "N/A",
            "Actors": "N/A",
            "Language": self.language,
            "Awards": "N/A",
            "Metascore": "N/A",
            "imdbRating": "N/A",
            "imdbVotes": "N/A",
            "imdbID": self.source_id,
            "Type": "movie",
            "totalSeasons": "N/A",
            "Response": "True",
            "Ratings": [{"Source": "N/A", "Value": "N/A"}],
            "rating": 3,
        }


@dataclass(frozen=True)
class LiveSegment:
    """A broadcaster-supplied scheduled interval [start, end)."""

    start: datetime
    end: datetime
    broadcaster_id: str
    segment_id: str | None = None
    title: str | None = None
    is_recurring: bool = False
    category_id: str | None = None
    category_name: str | None = None

    def __post_init__(self) -> None:
        for value in (self.start, self.end):
            if not isinstance(value, datetime) or value.tzinfo is None:
                raise InvalidInputError("LiveSegment start/end must be aware datetimes")
        if self.end < self.start:
            raise InvalidInputError(
                f"LiveSegment {self.segment_id!r} ends before it starts "
                f"({to_iso_z(self.start)} > {to_iso_z(self.end)})"
            )

    @property
    def interval(self) -> tuple[datetime, datetime]:
        return (self.start, self.end)

    @classmethod
    def from_record(cls, broadcaster_id: str, record: Mapping[str, Any]) -> LiveSegment:
        """Build from an upstream schedule segment (``start_time``/``end_time``)."""
        if not isinstance(record, Mapping):
            raise InvalidInputError(f"Schedule segment must be a mapping, got {type(record).__name__}")
        if record.get("end_time") is None:
            # Open-ended segments (still live, no planned end) have no interval to place
            raise InvalidInputError(f"Schedule segment {record.get('id')!r} has no end_time")
        category = record.get("category")
        if not isinstance(category, Mapping):
            category = {}
        fields = {field: record.get(key) for key, field in LIVE_SEGMENT_FIELDS.items()}
        return cls(
            start=parse_timestamp(record.get("start_time")),
            end=parse_timestamp(record.get("end_time")),
            broadcaster_id=str(broadcaster_id),
            segment_id=fields["segment_id"],
            title=fields["title"],
            is_recurring=bool(fields["is_recurring"]),
            category_id=category.get("id"),
            category_name=category.get("name"),
        )

    def to_dict(self) -> dict[str, Any]:
        category = None
        if self.category_id is not None or self.category_name is not None:
            category = {"id": self.category_id, "name": self.category_name}
        return {
            "broadcaster_id": self.broadcaster_id,
            "id": self.segment_id,
            "since": to_iso_z(self.start),
            "till": to_iso_z(self.end),
            "channelUuid": self.category_id,
            "title": self.title,
            "is_recurring": self.is_recurring,
            "category": category,
        }


def live_segments_from_schedule(
    broadcaster_id: str, payload: Mapping[str, Any] | None
) -> list[LiveSegment]:
    """Convert one broadcaster's schedule payload (``{"segments": [...]}``) to LiveSegments."""
    if not payload:
        return []
    if not isinstance(payload, Mapping):
        raise InvalidInputError(
            f"Schedule for broadcaster {broadcaster_id!r} must be an object, got {type(payload).__name__}"
        )
    segments = payload.get("segments") or []
    if not isinstance(segments, list):
        raise InvalidInputError(f"Segments for broadcaster {broadcaster_id!r} must be a list")
    return [LiveSegment.from_record(broadcaster_id, segment) for segment in segments]
