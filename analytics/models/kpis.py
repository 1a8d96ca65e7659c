"""
KPI result models for the channel analytics engine.

This module defines the period windows, metric bundles, comparisons and
report structures produced by the engine. All models are frozen plain data
with no formatting applied.
"""

from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .enums import ChangeStatus


class PeriodWindow(BaseModel):
    """
    A half-open date interval ``[start, end)``.

    Attributes:
        start: Inclusive lower bound
        end: Exclusive upper bound
    """

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(description="Inclusive lower bound")
    end: datetime = Field(description="Exclusive upper bound")

    @model_validator(mode="after")
    def validate_bounds(self) -> "PeriodWindow":
        """Ensure the window never has negative length."""
        if self.end < self.start:
            raise ValueError("window end must not precede window start")
        return self

    def contains(self, moment: datetime) -> bool:
        """Check whether a timestamp falls inside the window."""
        return self.start <= moment < self.end

    @property
    def months(self) -> int:
        """Whole calendar months between start and end."""
        delta = relativedelta(self.end, self.start)
        return delta.years * 12 + delta.months


class WindowPair(BaseModel):
    """Current window and the contiguous, equally long window before it."""

    model_config = ConfigDict(frozen=True)

    current: PeriodWindow
    previous: PeriodWindow
    period_months: int = Field(ge=1)


class MetricBundle(BaseModel):
    """
    Fixed set of aggregate statistics over a collection of items.

    Every numeric field is 0 for an empty collection.

    Attributes:
        total_views: Sum of measured view counts
        total_likes: Sum of likes over all items
        total_comments: Sum of comments over all items
        median_views: Median of measured view counts (rounded half up)
        average_views: total_views divided by item_count (rounded half up)
        engagement_rate: (likes + comments) / views * 100, 2 decimals. A
            percentage, not a ratio: 11 likes+comments on 100 views is 11.0,
            not 0.11
        median_engagement: Median of per-item likes + comments
        max_engagement: Maximum per-item likes + comments
        item_count: Number of items, measured or not
    """

    model_config = ConfigDict(frozen=True)

    total_views: int = Field(default=0, ge=0)
    total_likes: int = Field(default=0, ge=0)
    total_comments: int = Field(default=0, ge=0)
    median_views: int = Field(default=0, ge=0)
    average_views: int = Field(default=0, ge=0)
    engagement_rate: float = Field(default=0.0, ge=0.0)
    median_engagement: int = Field(default=0, ge=0)
    max_engagement: int = Field(default=0, ge=0)
    item_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def has_data(self) -> bool:
        """True when at least one item was aggregated."""
        return self.item_count > 0


class PeriodMetrics(BaseModel):
    """A metric bundle together with the window it was computed over."""

    model_config = ConfigDict(frozen=True)

    period_months: int = Field(ge=1)
    window: PeriodWindow
    metrics: MetricBundle

    @property
    def has_data(self) -> bool:
        return self.metrics.has_data


class ComparisonResult(BaseModel):
    """
    Percentage changes between a current and a previous bundle.

    Each field is a signed percentage rounded to one decimal, or None when
    the previous value was 0 or absent (a "new" metric).
    """

    model_config = ConfigDict(frozen=True)

    video_count_change: Optional[float] = None
    views_change: Optional[float] = None
    median_views_change: Optional[float] = None
    likes_change: Optional[float] = None
    comments_change: Optional[float] = None
    median_engagement_change: Optional[float] = None
    max_engagement_change: Optional[float] = None


class ChannelKPIReport(BaseModel):
    """
    Period-over-period KPIs for one channel.

    Attributes:
        channel_id: Channel the report belongs to
        channel_name: Display name, carried for consumers
        subscribers: Subscriber count, carried for consumers
        current_period: Metrics over the current window
        previous_period: Metrics over the previous window
        comparison: Percentage changes current vs previous
        statuses: Neutral-zone classification per comparison field
        is_new_channel: No items in the previous window but some in the current one
        publish_frequency: Items per week over the current window
    """

    model_config = ConfigDict(frozen=True)

    channel_id: str
    channel_name: str = ""
    subscribers: Optional[int] = None
    current_period: PeriodMetrics
    previous_period: PeriodMetrics
    comparison: ComparisonResult
    statuses: dict[str, ChangeStatus] = Field(default_factory=dict)
    is_new_channel: bool = False
    publish_frequency: float = Field(default=0.0, ge=0.0)


class GlobalSummary(BaseModel):
    """KPIs over the pooled items of a channel set."""

    model_config = ConfigDict(frozen=True)

    channel_count: int = Field(ge=0)
    current_period: PeriodMetrics
    previous_period: PeriodMetrics
    comparison: ComparisonResult
    statuses: dict[str, ChangeStatus] = Field(default_factory=dict)
    skipped_channel_ids: list[str] = Field(default_factory=list)


class ChannelTable(BaseModel):
    """Per-channel reports for a whole channel set."""

    model_config = ConfigDict(frozen=True)

    period_months: int = Field(ge=1)
    reference_date: datetime
    rows: list[ChannelKPIReport] = Field(default_factory=list)
    failed_channel_ids: list[str] = Field(default_factory=list)
