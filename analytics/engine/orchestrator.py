"""
KPI Orchestrator — period-over-period KPIs for channels and channel sets.

Composes the window resolver, aggregator and comparator into per-channel
reports and a pooled global summary, and exposes the series builder and
heatmap normalizer against the same reference date.

The reference date is fixed when the engine is built and never changes
afterwards; a new data load builds a new engine. Reports are memoized per
(channel_id, period_months) for the engine's lifetime since inputs do not
change within one load.
"""

from datetime import datetime
from typing import Iterable, Optional, Union

import structlog

from analytics.config import Settings, get_settings
from analytics.engine.aggregator import aggregate, publish_frequency
from analytics.engine.comparator import NeutralThresholds, classify_comparison, compare
from analytics.engine.errors import InvalidArgumentError
from analytics.engine.heatmap import HeatmapNormalizer
from analytics.engine.series import build_series
from analytics.engine.windows import (
    coerce_datetime,
    items_in_window,
    resolve_reference_date,
    resolve_windows,
    validate_period,
)
from analytics.models.channels import Channel, ContentItem
from analytics.models.enums import Granularity, HeatmapMetric, MetricKind, RankingMetric
from analytics.models.kpis import (
    ChannelKPIReport,
    ChannelTable,
    GlobalSummary,
    PeriodMetrics,
)
from analytics.models.series import ChannelSeries

logger = structlog.get_logger()


class KPIEngine:
    """
    Computes channel KPIs against one immutable reference date.

    Attributes:
        settings: Engine settings (projection floor, granularity cut-off)
        thresholds: Neutral zones used to classify changes

    Example:
        >>> engine = KPIEngine.from_channels(channels)
        >>> report = engine.channel_kpis(channels[0], period_months=3)
        >>> summary = engine.global_summary(channels, period_months=3)
    """

    def __init__(
        self,
        reference_date,
        settings: Optional[Settings] = None,
        thresholds: Optional[NeutralThresholds] = None,
    ):
        """
        Initialize the engine.

        Args:
            reference_date: Exclusive end of every current window
            settings: Engine settings (default: environment settings)
            thresholds: Neutral zones (default: taken from settings)

        Raises:
            InvalidArgumentError: If the reference date is malformed
        """
        self._reference_date = coerce_datetime(reference_date)
        self.settings = settings or get_settings()
        self.thresholds = thresholds or NeutralThresholds.from_settings(self.settings)
        self._reports: dict[tuple[str, int], ChannelKPIReport] = {}
        self.logger = logger.bind(reference_date=self._reference_date.isoformat())

    @classmethod
    def from_channels(
        cls,
        channels: Iterable[Channel],
        settings: Optional[Settings] = None,
        thresholds: Optional[NeutralThresholds] = None,
        now: Optional[datetime] = None,
    ) -> "KPIEngine":
        """Build an engine anchored to the latest publish date in ``channels``."""
        return cls(
            resolve_reference_date(channels, now=now),
            settings=settings,
            thresholds=thresholds,
        )

    @property
    def reference_date(self) -> datetime:
        return self._reference_date

    def with_threshold(self, kind: Union[MetricKind, str], percentage: float) -> "KPIEngine":
        """New engine on the same reference date with one neutral zone overridden."""
        return KPIEngine(
            self._reference_date,
            settings=self.settings,
            thresholds=self.thresholds.with_threshold(kind, percentage),
        )

    # =========================================================================
    # Period KPIs
    # =========================================================================

    def channel_kpis(self, channel: Channel, period_months: int) -> ChannelKPIReport:
        """
        Current vs previous period KPIs for one channel.

        Args:
            channel: Channel to report on
            period_months: Window length in months

        Returns:
            ChannelKPIReport with both periods, comparison and statuses

        Raises:
            InvalidArgumentError: If period_months <= 0
        """
        period_months = validate_period(period_months)
        key = (channel.channel_id, period_months)
        cached = self._reports.get(key)
        if cached is not None:
            return cached

        windows = resolve_windows(self._reference_date, period_months)
        current = aggregate(items_in_window(channel.items, windows.current))
        previous = aggregate(items_in_window(channel.items, windows.previous))
        comparison = compare(current, previous)

        report = ChannelKPIReport(
            channel_id=channel.channel_id,
            channel_name=channel.channel_name,
            subscribers=channel.subscribers,
            current_period=PeriodMetrics(
                period_months=period_months, window=windows.current, metrics=current
            ),
            previous_period=PeriodMetrics(
                period_months=period_months, window=windows.previous, metrics=previous
            ),
            comparison=comparison,
            statuses=classify_comparison(comparison, self.thresholds),
            is_new_channel=previous.item_count == 0 and current.item_count > 0,
            publish_frequency=publish_frequency(current.item_count, period_months),
        )
        self._reports[key] = report

        self.logger.debug(
            "channel_kpis_computed",
            channel_id=channel.channel_id,
            period_months=period_months,
            current_items=current.item_count,
            previous_items=previous.item_count,
            views_change=comparison.views_change,
        )
        return report

    def channel_table(self, channels: Iterable[Channel], period_months: int) -> ChannelTable:
        """
        Reports for every channel; a failing channel is skipped and listed.

        Raises:
            InvalidArgumentError: If period_months <= 0
        """
        period_months = validate_period(period_months)
        rows = []
        failed = []
        for channel in channels:
            try:
                rows.append(self.channel_kpis(channel, period_months))
            except Exception as e:
                channel_id = getattr(channel, "channel_id", repr(channel))
                self.logger.error(
                    "channel_skipped",
                    channel_id=channel_id,
                    period_months=period_months,
                    error=str(e),
                )
                failed.append(channel_id)

        self.logger.info(
            "channel_table_computed",
            period_months=period_months,
            rows=len(rows),
            failed=len(failed),
        )
        return ChannelTable(
            period_months=period_months,
            reference_date=self._reference_date,
            rows=rows,
            failed_channel_ids=failed,
        )

    def global_summary(self, channels: Iterable[Channel], period_months: int) -> GlobalSummary:
        """
        KPIs over the pooled items of all channels.

        Items are concatenated per window before aggregating, so the median
        is the true pooled median rather than a combination of per-channel
        medians.

        Raises:
            InvalidArgumentError: If period_months <= 0
        """
        windows = resolve_windows(self._reference_date, period_months)
        pooled_current: list[ContentItem] = []
        pooled_previous: list[ContentItem] = []
        skipped = []
        channel_count = 0

        for channel in channels:
            try:
                current_items = items_in_window(channel.items, windows.current)
                previous_items = items_in_window(channel.items, windows.previous)
            except Exception as e:
                channel_id = getattr(channel, "channel_id", repr(channel))
                self.logger.error(
                    "channel_skipped",
                    channel_id=channel_id,
                    period_months=period_months,
                    error=str(e),
                )
                skipped.append(channel_id)
                continue
            pooled_current.extend(current_items)
            pooled_previous.extend(previous_items)
            channel_count += 1

        current = aggregate(pooled_current)
        previous = aggregate(pooled_previous)
        comparison = compare(current, previous)

        self.logger.info(
            "global_summary_computed",
            period_months=period_months,
            channel_count=channel_count,
            current_items=current.item_count,
            previous_items=previous.item_count,
            skipped=len(skipped),
        )

        return GlobalSummary(
            channel_count=channel_count,
            current_period=PeriodMetrics(
                period_months=windows.period_months, window=windows.current, metrics=current
            ),
            previous_period=PeriodMetrics(
                period_months=windows.period_months, window=windows.previous, metrics=previous
            ),
            comparison=comparison,
            statuses=classify_comparison(comparison, self.thresholds),
            skipped_channel_ids=skipped,
        )

    # =========================================================================
    # Series, heatmap, rankings
    # =========================================================================

    def series(
        self,
        channel: Channel,
        months: int,
        granularity: Optional[Granularity] = None,
    ) -> ChannelSeries:
        """Bucketed series for one channel, ending at the reference date."""
        return build_series(
            channel,
            months,
            self._reference_date,
            granularity=granularity,
            min_fraction=self.settings.projection_min_fraction,
            weekly_max_months=self.settings.weekly_granularity_max_months,
        )

    def heatmap(
        self,
        reports: Iterable[ChannelKPIReport],
        metrics: Iterable[HeatmapMetric] = tuple(HeatmapMetric),
    ) -> HeatmapNormalizer:
        """Heatmap ranges over the given (visible) channel reports."""
        return HeatmapNormalizer.from_reports(reports, tuple(metrics))

    def top_items(
        self,
        channel: Channel,
        period_months: int,
        metric: RankingMetric = RankingMetric.VIEWS,
        limit: int = 5,
    ) -> list[ContentItem]:
        """
        Current-window items ranked by views or by engagement, highest first.

        Unmeasured views rank as 0.

        Raises:
            InvalidArgumentError: If period_months <= 0 or limit < 0
        """
        if limit < 0:
            raise InvalidArgumentError("limit", limit, "must be >= 0")
        windows = resolve_windows(self._reference_date, period_months)
        items = items_in_window(channel.items, windows.current)

        if RankingMetric(metric) == RankingMetric.ENGAGEMENT:
            ranked = sorted(items, key=lambda item: item.engagement, reverse=True)
        else:
            ranked = sorted(items, key=lambda item: item.views or 0, reverse=True)
        return ranked[:limit]
