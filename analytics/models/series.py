"""
Time series models for bucketed channel activity.

A series is a run of contiguous calendar buckets (ISO weeks or months).
The bucket containing the reference date may still be open; such a bucket
carries an extrapolated value and is flagged as a projection.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import ChangeStatus, Granularity
from .kpis import MetricBundle


class SeriesBucket(BaseModel):
    """
    One calendar bucket of a channel series.

    Attributes:
        label: "W05 2024" for ISO weeks, "2024-05" for months
        start: Inclusive bucket start
        end: Exclusive bucket end
        count: Item count (extrapolated when is_projection)
        total_views: Total views (extrapolated when is_projection)
        median_views: Observed median views, never extrapolated
        observed: Raw aggregate over the observed part of the bucket
        elapsed_fraction: Share of the bucket elapsed at the reference date
        is_projection: True for an open bucket carrying an estimate
    """

    model_config = ConfigDict(frozen=True)

    label: str
    start: datetime
    end: datetime
    count: int = Field(default=0, ge=0)
    total_views: int = Field(default=0, ge=0)
    median_views: int = Field(default=0, ge=0)
    observed: MetricBundle = Field(default_factory=MetricBundle)
    elapsed_fraction: float = Field(default=1.0, ge=0.0, le=1.0)
    is_projection: bool = False


class ChannelSeries(BaseModel):
    """Ordered buckets (oldest first) for one channel."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    granularity: Granularity
    months: int = Field(ge=1)
    reference_date: datetime
    buckets: list[SeriesBucket] = Field(default_factory=list)

    @computed_field
    @property
    def labels(self) -> list[str]:
        return [bucket.label for bucket in self.buckets]

    @computed_field
    @property
    def is_projection(self) -> list[bool]:
        return [bucket.is_projection for bucket in self.buckets]

    @property
    def per_bucket(self) -> list[dict]:
        """Plain {count, total_views, median_views} rows for charting."""
        return [
            {
                "count": bucket.count,
                "total_views": bucket.total_views,
                "median_views": bucket.median_views,
            }
            for bucket in self.buckets
        ]


class BucketTrend(BaseModel):
    """Change of one bucket against the bucket before it."""

    model_config = ConfigDict(frozen=True)

    label: str
    change: Optional[float] = None
    status: ChangeStatus
