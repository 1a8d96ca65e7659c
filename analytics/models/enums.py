"""
Enumeration types for the channel analytics engine.

All enums inherit from str to ensure JSON serialization compatibility.
"""

from enum import Enum


class ChangeStatus(str, Enum):
    """
    Classification of a period-over-period change.

    NEW marks a change with no baseline (previous value 0 or absent).
    PROJECTED marks an extrapolated bucket that must not be judged against
    closed buckets.
    """

    NEW = "new"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    PROJECTED = "projected"


class MetricKind(str, Enum):
    """
    Metric families that carry their own neutral-zone threshold.

    Kinds without a configured threshold fall back to the default zone.
    """

    VIDEOS = "videos"
    VIEWS = "views"
    MEDIAN_VIEWS = "median_views"
    SUBSCRIBERS = "subscribers"
    LIKES = "likes"
    COMMENTS = "comments"
    ENGAGEMENT = "engagement"


class Granularity(str, Enum):
    """Bucket size for time series."""

    WEEK = "week"
    MONTH = "month"


class HeatmapMetric(str, Enum):
    """Channel table columns that receive a relative color encoding."""

    VIDEOS = "videos"
    VIEWS = "views"
    MEDIAN_VIEWS = "median_views"
    ENGAGEMENT = "engagement"
    PUBLISH_FREQUENCY = "publish_frequency"


class RankingMetric(str, Enum):
    """Orderings available for top-item lists."""

    VIEWS = "views"
    ENGAGEMENT = "engagement"
