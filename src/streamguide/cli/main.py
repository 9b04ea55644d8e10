"""
Main CLI application using Typer.

Reads upstream payloads saved as JSON files, runs the schedule engine and
prints the guide JSON on stdout. Domain errors go to stderr with exit code 1.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from streamguide.infra.exceptions import InvalidInputError, StreamGuideError
from streamguide.infra.logging import configure_logging
from streamguide.infra.settings import settings
from streamguide.runtime.catalog_scheduler import synthesize_daily_schedule
from streamguide.runtime.channels import FileChannelDirectory
from streamguide.runtime.clock import GuideClock, MasterClock, SteppedClock
from streamguide.runtime.duration import format_duration, total_duration
from streamguide.runtime.epg import build_epg
from streamguide.runtime.guide_types import LiveSegment, live_segments_from_schedule, parse_timestamp
from streamguide.runtime.live_reconciler import reconcile_live_segments
from streamguide.runtime.record_source import JsonSnapshotRecordSource, collect_live_segments

app = typer.Typer(help="streamguide operator CLI")


def _load_json(path: Path) -> Any:
    if not path.is_file():
        typer.echo(f"Error: File not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in {path}: {e}", err=True)
        raise typer.Exit(1)


def _clock(now: str | None) -> GuideClock:
    if now is None:
        return MasterClock()
    return SteppedClock(parse_timestamp(now))


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _segments_from_payload(data: Any) -> list[LiveSegment]:
    """Accept schedule payloads with a broadcaster_id, or bare segments carrying one."""
    if not isinstance(data, list):
        data = [data]
    segments: list[LiveSegment] = []
    for record in data:
        if not isinstance(record, dict):
            raise InvalidInputError(f"Expected an object, got {type(record).__name__}")
        broadcaster_id = record.get("broadcaster_id", "")
        if "segments" in record:
            segments.extend(live_segments_from_schedule(broadcaster_id, record))
        else:
            segments.append(LiveSegment.from_record(broadcaster_id, record))
    return segments


@app.command("duration")
def duration_cmd(
    tokens: list[str] = typer.Argument(..., help="Duration tokens, e.g. 1h2m3s; several are summed"),
    as_clock: bool = typer.Option(False, "--format", help="Print HH:MM:SS instead of seconds"),
):
    """Parse duration tokens and print their total."""
    try:
        seconds = total_duration(tokens)
    except StreamGuideError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(format_duration(seconds) if as_clock else str(seconds))


@app.command("synthesize")
def synthesize_cmd(
    videos: Path = typer.Argument(..., help="JSON file with the category's video records"),
    category: str = typer.Option(..., "--category", help="Category id the entries are listed under"),
    genre: str | None = typer.Option(None, "--genre", help="Genre shown on every entry"),
    tz: str | None = typer.Option(None, "--tz", help="IANA timezone of the midnight boundary"),
    now: str | None = typer.Option(None, "--now", help="ISO timestamp to build the day around"),
):
    """Loop a video catalog into a full-day schedule.

    Examples:
        streamguide synthesize videos.json --category 509658 --tz America/New_York
    """
    records = _load_json(videos)
    if isinstance(records, dict):
        records = records.get("data", [])
    try:
        schedule = synthesize_daily_schedule(records, category, clock=_clock(now), tz=tz, genre=genre)
    except StreamGuideError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _emit([entry.to_dict() for entry in schedule])


@app.command("reconcile")
def reconcile_cmd(
    segments_file: Path | None = typer.Argument(None, help="JSON file with schedule payloads or segments"),
    snapshot_dir: Path | None = typer.Option(
        None, "--snapshot", help="Snapshot directory; reads every schedules/<broadcaster_id>.json"
    ),
    since: str | None = typer.Option(None, "--since", help="Drop segments starting before this ISO time"),
    till: str | None = typer.Option(None, "--till", help="Drop segments ending after this ISO time"),
):
    """Merge overlapping broadcaster schedules into one timeline.

    Examples:
        streamguide reconcile segments.json
        streamguide reconcile --snapshot ./snapshot --since 2025-01-15T00:00:00Z
    """
    if (segments_file is None) == (snapshot_dir is None):
        typer.echo("Error: Pass either SEGMENTS_FILE or --snapshot", err=True)
        raise typer.Exit(1)
    if snapshot_dir is not None and not snapshot_dir.is_dir():
        typer.echo(f"Error: Directory not found: {snapshot_dir}", err=True)
        raise typer.Exit(1)

    try:
        if snapshot_dir is not None:
            source = JsonSnapshotRecordSource(snapshot_dir)
            segments = collect_live_segments(source, source.list_broadcaster_ids())
        else:
            segments = _segments_from_payload(_load_json(segments_file))
        timeline = reconcile_live_segments(segments, since=since, till=till)
    except StreamGuideError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _emit([segment.to_dict() for segment in timeline])


@app.command("epg")
def epg_cmd(
    snapshot_dir: Path = typer.Argument(..., help="Snapshot directory (videos/<category_id>.json)"),
    channels_file: Path | None = typer.Option(None, "--channels", help="Channels JSON file"),
    tz: str | None = typer.Option(None, "--tz", help="IANA timezone of the midnight boundary"),
    now: str | None = typer.Option(None, "--now", help="ISO timestamp to build the day around"),
):
    """Build today's guide for every configured channel."""
    channels_path = channels_file or (Path(settings.channels_file) if settings.channels_file else None)
    if channels_path is None:
        typer.echo("Error: No channels file (use --channels or CHANNELS_FILE)", err=True)
        raise typer.Exit(1)
    if not channels_path.is_file():
        typer.echo(f"Error: File not found: {channels_path}", err=True)
        raise typer.Exit(1)

    directory = FileChannelDirectory(channels_path)
    source = JsonSnapshotRecordSource(snapshot_dir)
    catalogs: dict[str, list[dict[str, Any]]] = {}
    try:
        for channel in directory.list_channels():
            videos = source.fetch_videos(channel.uuid)
            if videos:
                catalogs[channel.uuid] = videos
            else:
                typer.echo(f"Warning: No videos for channel {channel.title} ({channel.uuid})", err=True)

        epg = build_epg(catalogs, directory, clock=_clock(now), tz=tz)
    except (StreamGuideError, json.JSONDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _emit([entry.to_dict() for entry in epg])


@app.command("channels")
def channels_cmd(
    channels_file: Path = typer.Argument(..., help="Channels JSON file"),
):
    """List the configured guide channels."""
    if not channels_file.is_file():
        typer.echo(f"Error: File not found: {channels_file}", err=True)
        raise typer.Exit(1)
    try:
        channels = FileChannelDirectory(channels_file).list_channels()
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in {channels_file}: {e}", err=True)
        raise typer.Exit(1)
    _emit([channel.to_dict() for channel in channels])


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Log level (DEBUG, INFO, ...)"),
):
    """streamguide - TV-guide schedules from live-streaming metadata."""
    configure_logging(settings.model_copy(update={"log_level": log_level}))


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
