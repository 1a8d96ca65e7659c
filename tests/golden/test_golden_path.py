"""
Golden Path (End-to-End) Tests for the channel analytics engine.

These tests run fixed datasets through the full pipeline, from raw channel
records through the adapter and the KPI engine, and compare against values
worked out by hand.
"""

import pytest

from analytics.adapters.channel_adapter import ChannelAdapter
from analytics.engine.aggregator import median
from analytics.engine.orchestrator import KPIEngine
from analytics.engine.series import bucket_trends
from analytics.models.enums import ChangeStatus, Granularity, HeatmapMetric
from tests.conftest import make_channel, make_item, make_raw_channel, utc


# ============================================================================
# Scenario 1: Period-over-period KPIs for one channel
# ============================================================================


def test_golden_one_month_period_over_period(engine, scenario_channel):
    """
    Golden path: items at M-3 (100, 200, 300), M-2 (50) and M-1 (400).

    With M = June 2024 and a 1-month period, the current window [May, June)
    holds only the 400-view item and the previous window [April, May) only
    the 50-view item.
    """
    report = engine.channel_kpis(scenario_channel, 1)

    current = report.current_period
    assert current.window.start == utc(2024, 5, 1)
    assert current.window.end == utc(2024, 6, 1)
    assert current.metrics.total_views == 400
    assert current.metrics.median_views == 400
    assert current.metrics.item_count == 1

    previous = report.previous_period
    assert previous.window.start == utc(2024, 4, 1)
    assert previous.metrics.total_views == 50
    assert previous.metrics.item_count == 1

    assert report.comparison.views_change == 700.0
    assert report.comparison.video_count_change == 0.0
    assert report.statuses["views_change"] == ChangeStatus.POSITIVE
    assert report.statuses["video_count_change"] == ChangeStatus.NEUTRAL
    assert report.is_new_channel is False

    # likes 40 vs 5, comments 4 vs 0
    assert report.comparison.likes_change == 700.0
    assert report.comparison.comments_change is None
    assert current.metrics.engagement_rate == 11.0


def test_golden_three_month_period_new_channel(engine, scenario_channel):
    """
    Golden path: a 3-month period covers every item; the previous window
    [Dec, Mar) is empty so the channel is new and every change is NEW.
    """
    report = engine.channel_kpis(scenario_channel, 3)

    metrics = report.current_period.metrics
    assert metrics.item_count == 5
    assert metrics.total_views == 1050
    assert metrics.median_views == 200
    assert metrics.average_views == 210
    assert metrics.total_likes == 105
    assert metrics.total_comments == 10
    assert metrics.engagement_rate == 10.95
    assert metrics.median_engagement == 22
    assert metrics.max_engagement == 44

    assert report.previous_period.metrics.has_data is False
    assert report.is_new_channel is True
    assert set(report.statuses.values()) == {ChangeStatus.NEW}
    assert report.publish_frequency == 0.4


# ============================================================================
# Scenario 2: Pooled global summary
# ============================================================================


def test_golden_global_median_is_pooled(engine):
    """
    Golden path: channels with views [10, 20, 30] and [100] in the same
    period. The global median is median([10, 20, 30, 100]) = 25, not a
    combination of the per-channel medians.
    """
    first = make_channel(
        "UC_first",
        items=[make_item(utc(2024, 5, day), views=views) for day, views in ((2, 10), (9, 20), (16, 30))],
    )
    second = make_channel("UC_second", items=[make_item(utc(2024, 5, 20), views=100)])

    summary = engine.global_summary([first, second], 1)
    per_channel = [engine.channel_kpis(ch, 1).current_period.metrics.median_views for ch in (first, second)]

    assert summary.channel_count == 2
    assert summary.current_period.metrics.median_views == 25
    assert summary.current_period.metrics.total_views == 160
    assert summary.current_period.metrics.item_count == 4
    assert per_channel == [20, 100]
    assert summary.current_period.metrics.median_views != median(per_channel)


# ============================================================================
# Scenario 3: Raw records → adapter → table, series and heatmap
# ============================================================================


@pytest.fixture
def raw_records():
    """Two exporter records with string counters and one unmeasured item."""
    return [
        make_raw_channel(
            "UC_small",
            subscribers="1,200",
            videos=[
                {"video_id": "s1", "title": "Rain", "published_at": "2024-04-12T10:00:00Z",
                 "views": "800", "likes": "40", "comments": "4"},
                {"video_id": "s2", "title": "Night", "published_at": "2024-05-20T10:00:00Z",
                 "views": None, "likes": "12", "comments": None},
            ],
        ),
        make_raw_channel(
            "UC_big",
            subscribers=250000,
            videos=[
                {"video_id": "b1", "title": "Focus", "published_at": "2024-04-03T08:00:00Z",
                 "views": 10000, "likes": 500, "comments": 50},
                {"video_id": "b2", "title": "Sleep", "published_at": "2024-05-02T08:00:00Z",
                 "views": 9000, "likes": 450, "comments": 45},
                {"video_id": "b3", "title": "Study", "published_at": "2024-05-30T08:00:00Z",
                 "views": 15000, "likes": 900, "comments": 90},
            ],
        ),
    ]


def test_golden_raw_records_to_channel_table(raw_records, settings):
    """
    Golden path: adapter output feeds the engine; the reference date is the
    latest publish timestamp (2024-05-30 08:00) and channels are ordered by
    subscribers.
    """
    channels, load_report = ChannelAdapter().ingest(raw_records)
    assert [ch.channel_id for ch in channels] == ["UC_big", "UC_small"]
    assert load_report.loaded_channels == 2
    assert load_report.unmeasured_views == 1

    engine = KPIEngine.from_channels(channels, settings=settings)
    assert engine.reference_date == utc(2024, 5, 30, 8)

    table = engine.channel_table(channels, 1)
    big, small = table.rows
    assert table.failed_channel_ids == []

    # [2024-04-30 08:00, 2024-05-30 08:00): b2 only; b3 sits on the end boundary
    assert big.current_period.metrics.item_count == 1
    assert big.current_period.metrics.total_views == 9000
    assert big.previous_period.metrics.total_views == 10000
    assert big.comparison.views_change == -10.0
    assert big.statuses["views_change"] == ChangeStatus.NEUTRAL

    # s2 has no measured views: counted as an item, excluded from views
    assert small.current_period.metrics.item_count == 1
    assert small.current_period.metrics.total_views == 0
    assert small.current_period.metrics.total_likes == 12
    assert small.comparison.views_change == -100.0
    assert small.statuses["views_change"] == ChangeStatus.NEGATIVE

    normalizer = engine.heatmap(table.rows, [HeatmapMetric.VIEWS])
    assert normalizer.cells(big)[HeatmapMetric.VIEWS].position == 1.0
    assert normalizer.cells(small)[HeatmapMetric.VIEWS].position == 0.0


def test_golden_series_with_projection(settings):
    """
    Golden path: a 12-month series ends in a half-elapsed June bucket that is
    projected and never classified against May.
    """
    channel = make_channel(
        items=[
            make_item(utc(2024, 4, 20), views=100),
            make_item(utc(2024, 5, 5), views=150),
            make_item(utc(2024, 6, 2), views=100),
            make_item(utc(2024, 6, 10), views=300),
        ]
    )
    engine = KPIEngine(utc(2024, 6, 16), settings=settings)
    series = engine.series(channel, 12)

    assert series.granularity == Granularity.MONTH
    assert series.labels[0] == "2023-06"
    assert series.labels[-3:] == ["2024-04", "2024-05", "2024-06"]
    assert series.per_bucket[-3:] == [
        {"count": 1, "total_views": 100, "median_views": 100},
        {"count": 1, "total_views": 150, "median_views": 150},
        {"count": 4, "total_views": 800, "median_views": 200},
    ]

    trends = bucket_trends(series, thresholds=engine.thresholds)
    assert [t.status for t in trends[-3:]] == [
        ChangeStatus.NEW,
        ChangeStatus.POSITIVE,
        ChangeStatus.PROJECTED,
    ]
    assert trends[-1].change is None
