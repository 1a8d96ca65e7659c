"""
Metric Aggregator — reduce a set of content items to a MetricBundle.

View statistics only use items whose view count was measured. Likes and
comments are summed over every item (missing counters are already zero on
the model). The average divides by the unfiltered item count, so it reports
yield per published item rather than per measured item.

Rounding follows one rule everywhere: half up (``floor(x + 0.5)``), to the
nearest integer for medians and averages, two decimals for the engagement
rate and one decimal for percentages. The engagement rate is itself a
percentage (11.0 means 11 %), not a 0-1 ratio.
"""

import math
from typing import Iterable, Sequence, Union

import numpy as np

from analytics.engine.errors import InvalidArgumentError
from analytics.models.channels import ContentItem
from analytics.models.kpis import MetricBundle

Number = Union[int, float]

# 365.25 days / 12 months / 7 days
WEEKS_PER_MONTH = 365.25 / 12 / 7


def round_half_up(value: Number, ndigits: int = 0) -> Number:
    """
    Round with ties going toward positive infinity.

    Returns an int when ndigits == 0, a float otherwise.
    """
    if ndigits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def median(values: Sequence[Number]) -> int:
    """
    Median of a sequence, rounded half up to an integer.

    Odd length gives the middle element; even length gives the mean of the
    two middle elements. An empty sequence gives 0.
    """
    if len(values) == 0:
        return 0
    return round_half_up(float(np.median(np.asarray(values, dtype=float))))


def aggregate(items: Iterable[ContentItem]) -> MetricBundle:
    """
    Reduce items to totals, median, average and engagement statistics.

    Args:
        items: Content items, any order

    Returns:
        MetricBundle; all zeros for an empty input
    """
    items = list(items)
    if not items:
        return MetricBundle()

    views = [item.views for item in items if item.has_views]
    engagements = [item.engagement for item in items]

    total_views = sum(views)
    total_likes = sum(item.likes for item in items)
    total_comments = sum(item.comments for item in items)

    engagement_rate = (
        round_half_up((total_likes + total_comments) / total_views * 100, 2)
        if total_views > 0
        else 0.0
    )

    return MetricBundle(
        total_views=total_views,
        total_likes=total_likes,
        total_comments=total_comments,
        median_views=median(views),
        average_views=round_half_up(total_views / len(items)),
        engagement_rate=engagement_rate,
        median_engagement=median(engagements),
        max_engagement=max(engagements),
        item_count=len(items),
    )


def publish_frequency(item_count: int, months: int) -> float:
    """
    Items published per week over a window of ``months`` months.

    Rounded half up to one decimal.

    Raises:
        InvalidArgumentError: If months <= 0
    """
    if months <= 0:
        raise InvalidArgumentError("months", months, "must be positive")
    return round_half_up(item_count / (months * WEEKS_PER_MONTH), 1)
