"""
Channel analytics engine components.

This package contains the computation core:

- Window resolution: current and previous period ranges from a reference date
- Aggregation: totals, medians, averages and engagement for an item set
- Comparison: percentage change and neutral-zone classification
- Series: week/month buckets with a projected open bucket
- Heatmap: relative min/max normalization across a channel set
- Orchestration: per-channel reports and pooled global summaries

All components are pure and synchronous; the only anchor they share is the
reference date passed to them explicitly.
"""

__version__ = "1.0.0"

__all__ = [
    "AnalyticsError",
    "HeatmapNormalizer",
    "InvalidArgumentError",
    "KPIEngine",
    "NeutralThresholds",
    "aggregate",
    "build_series",
    "classify",
    "compare",
    "median",
    "normalize",
    "percent_change",
    "resolve_reference_date",
    "resolve_windows",
]

from analytics.engine.aggregator import aggregate, median
from analytics.engine.comparator import NeutralThresholds, classify, compare, percent_change
from analytics.engine.errors import AnalyticsError, InvalidArgumentError
from analytics.engine.heatmap import HeatmapNormalizer, normalize
from analytics.engine.orchestrator import KPIEngine
from analytics.engine.series import build_series
from analytics.engine.windows import resolve_reference_date, resolve_windows
