"""
Input models for channels and their content items.

Channels are read-only input to the engine. Field validators encode the
two null policies for counters: a missing view count stays unmeasured
(``None``) and is excluded from view statistics, while missing likes and
comments are coerced to zero at load time.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentItem(BaseModel):
    """
    A single published content item (video).

    Attributes:
        item_id: Source identifier of the item
        title: Display title
        published_at: Publish timestamp, timezone aware (naive input is UTC)
        views: View count, None when the source did not report it
        likes: Like count, 0 when the source did not report it
        comments: Comment count, 0 when the source did not report it
    """

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(default="", description="Source identifier of the item")
    title: str = Field(default="Untitled", description="Display title")
    published_at: datetime = Field(description="Publish timestamp used for all windowing")
    views: Optional[int] = Field(
        default=None, ge=0, description="View count, None when unmeasured"
    )
    likes: int = Field(default=0, ge=0, description="Like count")
    comments: int = Field(default=0, ge=0, description="Comment count")

    @field_validator("published_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so all comparisons are aware."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("likes", "comments", mode="before")
    @classmethod
    def default_missing_counter(cls, v):
        """Missing engagement counters count as zero."""
        return 0 if v is None else v

    @property
    def has_views(self) -> bool:
        """True when the view count was measured."""
        return self.views is not None

    @property
    def engagement(self) -> int:
        """Likes plus comments."""
        return self.likes + self.comments


class Channel(BaseModel):
    """
    A content channel and its items.

    Only channel_id, channel_name, subscribers and items are read by the
    engine; the remaining fields are descriptive metadata carried through
    for consumers.
    """

    model_config = ConfigDict(frozen=True)

    channel_id: str = Field(min_length=1, description="Unique channel identifier")
    channel_name: str = Field(default="Unknown", description="Display name")
    subscribers: Optional[int] = Field(default=None, ge=0, description="Subscriber count")
    items: tuple[ContentItem, ...] = Field(
        default_factory=tuple, description="Published items, any order"
    )

    description: str = Field(default="", description="Channel description")
    style: str = Field(default="", description="Free-text style / genre")
    emoji: str = Field(default="", description="Single icon emoji")
    emojis: str = Field(default="", description="Emoji prefix for the channel name")
    thumbnail_url: str = Field(default="", description="Channel avatar URL")
    total_views: Optional[int] = Field(default=None, ge=0, description="Lifetime views")
    total_videos: Optional[int] = Field(default=None, ge=0, description="Lifetime item count")
    created_at: str = Field(default="", description="Channel creation date as reported")

    @property
    def latest_published_at(self) -> Optional[datetime]:
        """Most recent publish timestamp, None when the channel has no items."""
        if not self.items:
            return None
        return max(item.published_at for item in self.items)


class LoadReport(BaseModel):
    """
    Outcome of normalizing one batch of raw channel records.

    Attributes:
        source: Data source the batch came from
        total_channels: Raw channel records seen
        loaded_channels: Channels that passed validation
        rejected_channels: Channel records dropped
        rejected_items: Item records dropped (bad timestamp or counters)
        unmeasured_views: Kept items whose view count is unknown
        rejected_sources: Files or record labels that could not be read
    """

    source: str
    total_channels: int = Field(default=0, ge=0)
    loaded_channels: int = Field(default=0, ge=0)
    rejected_channels: int = Field(default=0, ge=0)
    rejected_items: int = Field(default=0, ge=0)
    unmeasured_views: int = Field(default=0, ge=0)
    rejected_sources: list[str] = Field(default_factory=list)
