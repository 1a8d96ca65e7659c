"""
Comparator — period-over-period change and neutral-zone classification.

Compares two MetricBundles metric by metric. A change is a signed
percentage rounded half up to one decimal; a zero or missing baseline
produces None, which classifies as NEW rather than as a magnitude. Each
metric's NEW status depends only on its own previous value.

Classification uses per-metric neutral zones: a change whose absolute
value stays inside the zone is NEUTRAL, anything beyond it is POSITIVE or
NEGATIVE by sign.
"""

from typing import Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field

from analytics.config import Settings
from analytics.engine.aggregator import Number, round_half_up
from analytics.engine.errors import InvalidArgumentError
from analytics.models.enums import ChangeStatus, MetricKind
from analytics.models.kpis import ComparisonResult, MetricBundle

logger = structlog.get_logger()

# ComparisonResult field → metric kind whose neutral zone applies
COMPARISON_METRIC_KINDS = {
    "video_count_change": MetricKind.VIDEOS,
    "views_change": MetricKind.VIEWS,
    "median_views_change": MetricKind.MEDIAN_VIEWS,
    "likes_change": MetricKind.LIKES,
    "comments_change": MetricKind.COMMENTS,
    "median_engagement_change": MetricKind.ENGAGEMENT,
    "max_engagement_change": MetricKind.ENGAGEMENT,
}


class NeutralThresholds(BaseModel):
    """
    Neutral-zone widths in percent, per metric kind.

    Kinds without a dedicated field use ``default``.
    """

    model_config = ConfigDict(frozen=True)

    videos: float = Field(default=15.0, ge=0.0)
    views: float = Field(default=10.0, ge=0.0)
    median_views: float = Field(default=7.0, ge=0.0)
    subscribers: float = Field(default=5.0, ge=0.0)
    default: float = Field(default=10.0, ge=0.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NeutralThresholds":
        return cls(
            videos=settings.threshold_videos,
            views=settings.threshold_views,
            median_views=settings.threshold_median_views,
            subscribers=settings.threshold_subscribers,
            default=settings.threshold_default,
        )

    def for_metric(self, kind: Union[MetricKind, str]) -> float:
        """Neutral zone for a metric kind, falling back to the default."""
        key = kind.value if isinstance(kind, MetricKind) else str(kind)
        if key in self.configurable_kinds():
            return getattr(self, key)
        return self.default

    def with_threshold(self, kind: Union[MetricKind, str], percentage: float) -> "NeutralThresholds":
        """
        Copy with one neutral zone overridden.

        Unknown kinds are ignored (logged) and return the thresholds unchanged.

        Raises:
            InvalidArgumentError: If percentage is negative
        """
        if percentage < 0:
            raise InvalidArgumentError("percentage", percentage, "neutral zone must be >= 0")
        key = kind.value if isinstance(kind, MetricKind) else str(kind)
        if key not in self.configurable_kinds():
            logger.warning("threshold_override_ignored", metric_kind=key, percentage=percentage)
            return self
        return self.model_copy(update={key: float(percentage)})

    @staticmethod
    def configurable_kinds() -> tuple[str, ...]:
        return (
            MetricKind.VIDEOS.value,
            MetricKind.VIEWS.value,
            MetricKind.MEDIAN_VIEWS.value,
            MetricKind.SUBSCRIBERS.value,
        )


def percent_change(current: Optional[Number], previous: Optional[Number]) -> Optional[float]:
    """
    Signed percentage change rounded half up to one decimal.

    Returns None when the previous value is 0 or None.
    """
    if previous is None or previous == 0:
        return None
    current = current or 0
    return round_half_up((current - previous) / previous * 1000) / 10


def compare(
    current: MetricBundle,
    previous: MetricBundle,
    current_count: Optional[int] = None,
    previous_count: Optional[int] = None,
) -> ComparisonResult:
    """
    Percentage changes from ``previous`` to ``current``.

    Args:
        current: Bundle for the current window
        previous: Bundle for the previous window
        current_count: Item count for the current window (default: bundle count)
        previous_count: Item count for the previous window (default: bundle count)
    """
    if current_count is None:
        current_count = current.item_count
    if previous_count is None:
        previous_count = previous.item_count

    return ComparisonResult(
        video_count_change=percent_change(current_count, previous_count),
        views_change=percent_change(current.total_views, previous.total_views),
        median_views_change=percent_change(current.median_views, previous.median_views),
        likes_change=percent_change(current.total_likes, previous.total_likes),
        comments_change=percent_change(current.total_comments, previous.total_comments),
        median_engagement_change=percent_change(
            current.median_engagement, previous.median_engagement
        ),
        max_engagement_change=percent_change(current.max_engagement, previous.max_engagement),
    )


def classify(
    change: Optional[float],
    metric_kind: Union[MetricKind, str] = MetricKind.VIEWS,
    thresholds: Optional[NeutralThresholds] = None,
) -> ChangeStatus:
    """
    Classify a percentage change against the metric's neutral zone.

    None → NEW; ``|change| <= zone`` → NEUTRAL; otherwise POSITIVE or
    NEGATIVE by sign.
    """
    if change is None:
        return ChangeStatus.NEW

    thresholds = thresholds or NeutralThresholds()
    if abs(change) <= thresholds.for_metric(metric_kind):
        return ChangeStatus.NEUTRAL
    return ChangeStatus.POSITIVE if change > 0 else ChangeStatus.NEGATIVE


def classify_comparison(
    result: ComparisonResult,
    thresholds: Optional[NeutralThresholds] = None,
) -> dict[str, ChangeStatus]:
    """Status for every field of a ComparisonResult."""
    return {
        field: classify(getattr(result, field), kind, thresholds)
        for field, kind in COMPARISON_METRIC_KINDS.items()
    }
