"""
Guide channel configuration.

A guide channel is one upstream category shown as a TV channel: its `uuid` is
the category id a catalog is fetched for, its `title` becomes the genre of
every entry synthesized for it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import structlog

_log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ChannelConfig:
    """Configuration for a single guide channel."""

    uuid: str
    title: str
    logo: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChannelConfig:
        """Deserialize from dict (e.g. loaded from JSON). Missing uuid/title raise KeyError."""
        uuid = data["uuid"]
        title = data["title"]
        if not isinstance(title, str) or not title:
            raise ValueError("title must be a non-empty string")
        return cls(uuid=str(uuid), title=title, logo=data.get("logo"))

    def to_dict(self) -> dict[str, Any]:
        return {"uuid": self.uuid, "title": self.title, "logo": self.logo}


class ChannelDirectory(Protocol):
    """Protocol for resolving guide channels."""

    def get_channel(self, uuid: str) -> ChannelConfig | None:
        """Return the channel for a category id, or None."""
        ...

    def list_channels(self) -> list[ChannelConfig]:
        """All channels, in guide order."""
        ...


class InlineChannelDirectory:
    """
    Simple in-memory channel directory.

    Useful for testing or when channels are constructed programmatically.
    """

    def __init__(self, channels: list[ChannelConfig] | None = None):
        self._channels: dict[str, ChannelConfig] = {}
        for channel in channels or []:
            self._channels[channel.uuid] = channel

    def add_channel(self, channel: ChannelConfig) -> None:
        """Add or replace a channel."""
        self._channels[channel.uuid] = channel

    def get_channel(self, uuid: str) -> ChannelConfig | None:
        return self._channels.get(uuid)

    def list_channels(self) -> list[ChannelConfig]:
        return list(self._channels.values())


class FileChannelDirectory:
    """
    ChannelDirectory that loads channels from a JSON file.

    Expected JSON format:
    {
      "channels": [
        {"uuid": "509658", "title": "Just Chatting", "logo": "https://..."}
      ]
    }

    A bare top-level list of channel objects is accepted too.
    """

    def __init__(self, config_path: Path | str):
        self._config_path = Path(config_path)
        self._inline = InlineChannelDirectory()
        self._loaded = False

    def _ensure_loaded(self) -> None:
        """Load channels from file if not already loaded."""
        if self._loaded:
            return

        with open(self._config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        channels_data = data.get("channels", []) if isinstance(data, dict) else data
        for channel_data in channels_data:
            try:
                self._inline.add_channel(ChannelConfig.from_dict(channel_data))
            except (KeyError, ValueError, TypeError) as e:
                _log.warning(
                    "channel_config_skipped",
                    path=str(self._config_path),
                    uuid=channel_data.get("uuid", "<unknown>") if isinstance(channel_data, dict) else None,
                    error=str(e),
                )

        _log.info(
            "channel_configs_loaded",
            path=str(self._config_path),
            count=len(self._inline.list_channels()),
        )
        self._loaded = True

    def reload(self) -> None:
        """Force reload of channels from file."""
        self._loaded = False
        self._inline = InlineChannelDirectory()
        self._ensure_loaded()

    def get_channel(self, uuid: str) -> ChannelConfig | None:
        self._ensure_loaded()
        return self._inline.get_channel(uuid)

    def list_channels(self) -> list[ChannelConfig]:
        self._ensure_loaded()
        return self._inline.list_channels()
