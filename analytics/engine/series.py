"""
Series Builder — calendar-bucketed activity with a projected open bucket.

Buckets are whole calendar intervals (ISO weeks starting Monday, or
calendar months) covering the trailing window ``[ref - months, ref)``.
Short windows use weeks so a chart always has enough points. Only items
inside the trailing window are counted, so the oldest bucket may observe
just the tail of its calendar interval and the bucket totals add up to the
period KPIs over the same window.

The bucket containing the reference date is usually still open. Its raw
count and views under-state the full bucket, so they are scaled by the
inverse of the elapsed fraction and the bucket is flagged as a projection.
The fraction is floored to keep early-bucket estimates bounded. Projected
buckets are never classified against closed ones.
"""

from datetime import datetime, timedelta
from typing import Optional

import structlog
from dateutil.relativedelta import relativedelta

from analytics.engine.aggregator import aggregate, round_half_up
from analytics.engine.comparator import NeutralThresholds, classify, percent_change
from analytics.engine.errors import InvalidArgumentError
from analytics.engine.windows import coerce_datetime, validate_period
from analytics.models.channels import Channel
from analytics.models.enums import ChangeStatus, Granularity, MetricKind
from analytics.models.kpis import PeriodWindow
from analytics.models.series import BucketTrend, ChannelSeries, SeriesBucket

logger = structlog.get_logger()

DEFAULT_MIN_FRACTION = 0.1
DEFAULT_WEEKLY_MAX_MONTHS = 6

# Bucket field → metric kind whose neutral zone applies
TREND_METRIC_KINDS = {
    "count": MetricKind.VIDEOS,
    "total_views": MetricKind.VIEWS,
    "median_views": MetricKind.MEDIAN_VIEWS,
}


def select_granularity(months: int, weekly_max_months: int = DEFAULT_WEEKLY_MAX_MONTHS) -> Granularity:
    """Weekly buckets for windows up to ``weekly_max_months``, monthly beyond."""
    return Granularity.WEEK if months <= weekly_max_months else Granularity.MONTH


def bucket_label(start: datetime, granularity: Granularity) -> str:
    """'W05 2024' (ISO week, ISO week-year) or '2024-05'."""
    if granularity == Granularity.WEEK:
        iso_year, iso_week, _ = start.isocalendar()
        return f"W{iso_week:02d} {iso_year}"
    return f"{start.year}-{start.month:02d}"


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _bucket_start(moment: datetime, granularity: Granularity) -> datetime:
    if granularity == Granularity.WEEK:
        return _midnight(moment) - timedelta(days=moment.weekday())
    return _midnight(moment).replace(day=1)


def _bucket_step(granularity: Granularity):
    if granularity == Granularity.WEEK:
        return timedelta(weeks=1)
    return relativedelta(months=1)


def bucket_windows(
    reference_date: datetime,
    months: int,
    granularity: Granularity,
) -> list[PeriodWindow]:
    """
    Calendar buckets overlapping ``[reference_date - months, reference_date)``.

    Oldest first. The last bucket contains the reference date, or ends at
    it when the reference date sits exactly on a bucket boundary.
    """
    window_start = reference_date - relativedelta(months=months)
    step = _bucket_step(granularity)

    last_start = _bucket_start(reference_date, granularity)
    if last_start == reference_date:
        last_start = last_start - step

    starts = [last_start]
    while starts[-1] > window_start:
        starts.append(starts[-1] - step)

    return [PeriodWindow(start=start, end=start + step) for start in reversed(starts)]


def build_series(
    channel: Channel,
    months: int,
    reference_date,
    granularity: Optional[Granularity] = None,
    min_fraction: float = DEFAULT_MIN_FRACTION,
    weekly_max_months: int = DEFAULT_WEEKLY_MAX_MONTHS,
) -> ChannelSeries:
    """
    Bucket a channel's items over the trailing window ending at the reference date.

    Args:
        channel: Channel whose items are bucketed
        months: Trailing window length in months
        reference_date: Anchor of the window (exclusive end)
        granularity: Force week or month buckets (default: chosen from months)
        min_fraction: Floor on the elapsed fraction used for projection
        weekly_max_months: Longest window that still uses weekly buckets

    Returns:
        ChannelSeries with one bucket per calendar interval, including empty ones

    Raises:
        InvalidArgumentError: If months <= 0, min_fraction outside (0, 1],
            or the reference date is malformed
    """
    months = validate_period(months, argument="months")
    if not 0 < min_fraction <= 1:
        raise InvalidArgumentError("min_fraction", min_fraction, "must be in (0, 1]")
    reference_date = coerce_datetime(reference_date)
    granularity = granularity or select_granularity(months, weekly_max_months)
    window_start = reference_date - relativedelta(months=months)

    buckets = []
    for window in bucket_windows(reference_date, months, granularity):
        is_open = window.start < reference_date < window.end
        # Edge buckets only observe the part inside [window_start, reference_date)
        observed_start = max(window.start, window_start)
        observed_end = reference_date if is_open else window.end
        observed = aggregate(
            item
            for item in channel.items
            if observed_start <= item.published_at < observed_end
        )

        if is_open:
            elapsed = (reference_date - window.start) / (window.end - window.start)
            scale = 1 / max(elapsed, min_fraction)
            buckets.append(
                SeriesBucket(
                    label=bucket_label(window.start, granularity),
                    start=window.start,
                    end=window.end,
                    count=round_half_up(observed.item_count * scale),
                    total_views=round_half_up(observed.total_views * scale),
                    median_views=observed.median_views,
                    observed=observed,
                    elapsed_fraction=elapsed,
                    is_projection=True,
                )
            )
        else:
            buckets.append(
                SeriesBucket(
                    label=bucket_label(window.start, granularity),
                    start=window.start,
                    end=window.end,
                    count=observed.item_count,
                    total_views=observed.total_views,
                    median_views=observed.median_views,
                    observed=observed,
                )
            )

    logger.debug(
        "series_built",
        channel_id=channel.channel_id,
        granularity=granularity.value,
        bucket_count=len(buckets),
        projected=bool(buckets) and buckets[-1].is_projection,
    )

    return ChannelSeries(
        channel_id=channel.channel_id,
        granularity=granularity,
        months=months,
        reference_date=reference_date,
        buckets=buckets,
    )


def bucket_trends(
    series: ChannelSeries,
    metric: str = "total_views",
    thresholds: Optional[NeutralThresholds] = None,
) -> list[BucketTrend]:
    """
    Change of each bucket against the one before it.

    Closed buckets are classified with the metric's neutral zone (the first
    bucket has no baseline and is NEW). A projected bucket always gets
    PROJECTED and no change value, since its estimate is not comparable to
    a realized bucket.

    Raises:
        InvalidArgumentError: If metric is not a bucket value field
    """
    if metric not in TREND_METRIC_KINDS:
        raise InvalidArgumentError("metric", metric, f"expected one of {sorted(TREND_METRIC_KINDS)}")
    kind = TREND_METRIC_KINDS[metric]
    trends = []
    previous: Optional[SeriesBucket] = None
    for bucket in series.buckets:
        if bucket.is_projection:
            trends.append(BucketTrend(label=bucket.label, status=ChangeStatus.PROJECTED))
        else:
            baseline = getattr(previous, metric) if previous is not None else None
            change = percent_change(getattr(bucket, metric), baseline)
            trends.append(
                BucketTrend(
                    label=bucket.label,
                    change=change,
                    status=classify(change, kind, thresholds),
                )
            )
        previous = bucket
    return trends
