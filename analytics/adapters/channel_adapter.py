"""
Channel adapter — raw channel statistics JSON to Channel models.

Raw records come from per-channel JSON files listed in a manifest. Numbers
may arrive as strings, ints or be missing; nested thumbnails carry the
avatar URL. Items keep an unmeasured view count as None (they still count
toward volume), while items with an unreadable timestamp or invalid
counters are dropped and counted in the LoadReport.
"""

import json
from pathlib import Path
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError

from analytics.models.channels import Channel, ContentItem, LoadReport

logger = structlog.get_logger()

MANIFEST_NAME = "manifest.json"


class ChannelAdapter:
    """
    Normalizes raw channel dictionaries into immutable Channel models.

    Attributes:
        source_name: Identifier for the data source (e.g., "channel_stats")
    """

    def __init__(self, source_name: str = "channel_stats"):
        self.source_name = source_name
        self.logger = logger.bind(adapter=source_name)

    def ingest(
        self,
        records: Iterable[dict],
        labels: Optional[list[str]] = None,
    ) -> tuple[list[Channel], LoadReport]:
        """
        Normalize a batch of raw channel records.

        Channels are returned sorted by subscribers, highest first. Records
        that fail validation are skipped and reported, never raised.

        Args:
            records: Raw channel dictionaries
            labels: Optional label per record (e.g., file name) for reporting

        Returns:
            Tuple of (channels, load report)
        """
        records = list(records)
        labels = labels or [f"record_{i}" for i in range(len(records))]
        report = LoadReport(source=self.source_name, total_channels=len(records))
        channels = []

        for label, raw in zip(labels, records):
            try:
                channel, rejected_items = self.normalize(raw)
            except (ValidationError, TypeError, AttributeError) as e:
                self.logger.warning("channel_rejected", record=label, error=str(e))
                report.rejected_channels += 1
                report.rejected_sources.append(label)
                continue
            channels.append(channel)
            report.rejected_items += rejected_items
            report.unmeasured_views += sum(1 for item in channel.items if not item.has_views)

        channels.sort(key=lambda ch: ch.subscribers or 0, reverse=True)
        report.loaded_channels = len(channels)

        self.logger.info(
            "channels_ingested",
            total_channels=report.total_channels,
            loaded_channels=report.loaded_channels,
            rejected_channels=report.rejected_channels,
            rejected_items=report.rejected_items,
            unmeasured_views=report.unmeasured_views,
        )
        return channels, report

    def normalize(self, raw: dict) -> tuple[Channel, int]:
        """
        Normalize one raw channel record.

        Returns:
            Tuple of (channel, number of dropped item records)

        Raises:
            ValidationError: If the channel-level fields are invalid
        """
        items, rejected = self._normalize_items(raw.get("videos") or [])
        channel = Channel(
            channel_id=self._safe_str(raw.get("channel_id")),
            channel_name=self._safe_str(raw.get("channel_name"), default="Unknown"),
            description=self._safe_str(raw.get("description")),
            style=self._safe_str(raw.get("style")),
            emoji=self._safe_str(raw.get("emoji")),
            emojis=self._safe_str(raw.get("emojis")),
            thumbnail_url=self._thumbnail_url(raw),
            subscribers=self._parse_count(raw.get("subscribers")),
            total_views=self._parse_count(raw.get("total_views")),
            total_videos=self._parse_count(raw.get("total_videos")),
            created_at=self._safe_str(raw.get("created_at")),
            items=items,
        )
        return channel, rejected

    def _normalize_items(self, videos: list) -> tuple[list[ContentItem], int]:
        items = []
        rejected = 0
        for video in videos:
            try:
                items.append(
                    ContentItem(
                        item_id=self._safe_str(video.get("video_id")),
                        title=self._safe_str(video.get("title"), default="Untitled"),
                        published_at=video.get("published_at"),
                        views=self._parse_count(video.get("views")),
                        likes=self._parse_count(video.get("likes")),
                        comments=self._parse_count(video.get("comments")),
                    )
                )
            except (ValidationError, AttributeError) as e:
                rejected += 1
                self.logger.debug("item_rejected", error=str(e))
        items.sort(key=lambda item: item.published_at, reverse=True)
        return items, rejected

    def _thumbnail_url(self, raw: dict) -> str:
        thumbnails = raw.get("thumbnails")
        if not isinstance(thumbnails, dict):
            return ""
        default = thumbnails.get("default")
        if not isinstance(default, dict):
            return ""
        return self._safe_str(default.get("url"))

    @staticmethod
    def _parse_count(value) -> Optional[int]:
        """
        Parse a non-negative integer counter.

        Missing, empty, non-numeric and negative values all become None.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            value = value.strip().replace(",", "")
            if not value:
                return None
        try:
            parsed = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None
        return parsed if parsed >= 0 else None

    @staticmethod
    def _safe_str(value, default: str = "") -> str:
        if value is None:
            return default
        text = str(value).strip()
        return text or default


def load_channel_directory(
    directory: Path | str,
    adapter: Optional[ChannelAdapter] = None,
) -> tuple[list[Channel], LoadReport]:
    """
    Load every channel file listed in ``directory/manifest.json``.

    Files that cannot be read or parsed are skipped with a warning and
    listed in the report.

    Raises:
        FileNotFoundError: If the manifest is missing
        ValueError: If the manifest is not a JSON list of file names
    """
    directory = Path(directory)
    adapter = adapter or ChannelAdapter()
    manifest = json.loads((directory / MANIFEST_NAME).read_text(encoding="utf-8"))
    if not isinstance(manifest, list):
        raise ValueError(f"{MANIFEST_NAME} must be a JSON list of file names")

    records = []
    labels = []
    unreadable = []
    for filename in manifest:
        path = directory / str(filename)
        try:
            records.append(json.loads(path.read_text(encoding="utf-8")))
            labels.append(str(filename))
        except (OSError, json.JSONDecodeError) as e:
            adapter.logger.warning("channel_file_unreadable", file=str(filename), error=str(e))
            unreadable.append(str(filename))

    channels, report = adapter.ingest(records, labels=labels)
    report.total_channels += len(unreadable)
    report.rejected_channels += len(unreadable)
    report.rejected_sources.extend(unreadable)
    return channels, report
