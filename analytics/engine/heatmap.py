"""
Heatmap Normalizer — relative color positions across a channel set.

Ranges are computed once per render cycle over the visible channels, so a
position says how a channel compares to its peers, not to an absolute
scale.
"""

from typing import Iterable, Optional, Sequence

import structlog

from analytics.models.enums import HeatmapMetric
from analytics.models.heatmap import HeatmapCell, HeatmapRange
from analytics.models.kpis import ChannelKPIReport

logger = structlog.get_logger()

MIDPOINT = 0.5


def normalize(value: Optional[float], minimum: float, maximum: float) -> float:
    """
    Position of ``value`` inside ``[minimum, maximum]`` as a number in [0, 1].

    A degenerate range (all values tied) and a missing value both map to the
    midpoint. Values outside the range are clamped.
    """
    if value is None or maximum == minimum:
        return MIDPOINT
    position = (value - minimum) / (maximum - minimum)
    return min(1.0, max(0.0, position))


def metric_value(report: ChannelKPIReport, metric: HeatmapMetric) -> float:
    """Current-period value of a heatmap metric for one channel report."""
    bundle = report.current_period.metrics
    if metric == HeatmapMetric.VIDEOS:
        return bundle.item_count
    if metric == HeatmapMetric.VIEWS:
        return bundle.total_views
    if metric == HeatmapMetric.MEDIAN_VIEWS:
        return bundle.median_views
    if metric == HeatmapMetric.ENGAGEMENT:
        return bundle.engagement_rate
    return report.publish_frequency


def compute_ranges(
    reports: Iterable[ChannelKPIReport],
    metrics: Sequence[HeatmapMetric] = tuple(HeatmapMetric),
) -> dict[HeatmapMetric, HeatmapRange]:
    """
    Min/max per metric over a channel set.

    An empty set yields a degenerate (0, 0) range for every metric.
    """
    reports = list(reports)
    ranges = {}
    for metric in metrics:
        values = [metric_value(report, metric) for report in reports]
        if values:
            ranges[metric] = HeatmapRange(metric=metric, minimum=min(values), maximum=max(values))
        else:
            ranges[metric] = HeatmapRange(metric=metric)
    return ranges


class HeatmapNormalizer:
    """
    Holds the ranges of one render cycle and maps values to positions.

    Example:
        >>> normalizer = HeatmapNormalizer.from_reports(reports)
        >>> normalizer.position(HeatmapMetric.VIEWS, 125_000)
    """

    def __init__(self, ranges: dict[HeatmapMetric, HeatmapRange]):
        self.ranges = ranges

    @classmethod
    def from_reports(
        cls,
        reports: Iterable[ChannelKPIReport],
        metrics: Sequence[HeatmapMetric] = tuple(HeatmapMetric),
    ) -> "HeatmapNormalizer":
        reports = list(reports)
        normalizer = cls(compute_ranges(reports, metrics))
        logger.debug(
            "heatmap_ranges_computed",
            channel_count=len(reports),
            degenerate=[m.value for m, r in normalizer.ranges.items() if r.is_degenerate],
        )
        return normalizer

    def position(self, metric: HeatmapMetric, value: Optional[float]) -> float:
        """Normalized position; metrics without a range map to the midpoint."""
        bounds = self.ranges.get(metric)
        if bounds is None:
            return MIDPOINT
        return normalize(value, bounds.minimum, bounds.maximum)

    def cells(self, report: ChannelKPIReport) -> dict[HeatmapMetric, HeatmapCell]:
        """Value and position of every ranged metric for one channel."""
        cells = {}
        for metric in self.ranges:
            value = metric_value(report, metric)
            cells[metric] = HeatmapCell(
                metric=metric, value=value, position=self.position(metric, value)
            )
        return cells
