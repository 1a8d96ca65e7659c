"""
Pydantic v2 data models for the channel analytics engine.

Model Organization:
    - enums: Enumeration types for classification and bucketing
    - channels: Channel and content item input models
    - kpis: Period windows, metric bundles, comparisons and reports
    - series: Bucketed time series and bucket trends
    - heatmap: Relative ranges for color encoding

Usage:
    >>> from analytics.models import Channel, ContentItem
    >>> channel = Channel(
    ...     channel_id="UC123",
    ...     channel_name="Lo-fi Beats",
    ...     items=[ContentItem(published_at="2024-05-01T12:00:00Z", views=1200)],
    ... )
"""

# Enumerations
from .enums import ChangeStatus, Granularity, HeatmapMetric, MetricKind, RankingMetric

# Input models
from .channels import Channel, ContentItem, LoadReport

# KPI models
from .kpis import (
    ChannelKPIReport,
    ChannelTable,
    ComparisonResult,
    GlobalSummary,
    MetricBundle,
    PeriodMetrics,
    PeriodWindow,
    WindowPair,
)

# Series models
from .series import BucketTrend, ChannelSeries, SeriesBucket

# Heatmap models
from .heatmap import HeatmapCell, HeatmapRange

__all__ = [
    # Enumerations
    "ChangeStatus",
    "Granularity",
    "HeatmapMetric",
    "MetricKind",
    "RankingMetric",
    # Input models
    "Channel",
    "ContentItem",
    "LoadReport",
    # KPI models
    "ChannelKPIReport",
    "ChannelTable",
    "ComparisonResult",
    "GlobalSummary",
    "MetricBundle",
    "PeriodMetrics",
    "PeriodWindow",
    "WindowPair",
    # Series models
    "BucketTrend",
    "ChannelSeries",
    "SeriesBucket",
    # Heatmap models
    "HeatmapCell",
    "HeatmapRange",
]
