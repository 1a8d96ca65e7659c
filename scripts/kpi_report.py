#!/usr/bin/env python3
"""
Channel KPI Report
==================
Loads a channel statistics directory and prints period-over-period KPIs.

The directory must contain a manifest.json listing one JSON file per
channel. The reference date is the latest publish date found in the data.

Usage:
    python scripts/kpi_report.py channel_stats/                  # 1-month table
    python scripts/kpi_report.py channel_stats/ --period 3       # 3-month table
    python scripts/kpi_report.py channel_stats/ --json           # JSON output
    python scripts/kpi_report.py channel_stats/ --series UC123 --months 12
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from analytics.adapters import load_channel_directory  # noqa: E402
from analytics.engine import InvalidArgumentError, KPIEngine  # noqa: E402
from analytics.engine.series import bucket_trends  # noqa: E402
from analytics.utils.logging import configure_logging  # noqa: E402


def _change(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:+.1f}%"


def print_table(engine: KPIEngine, table, summary) -> None:
    """Plain-text table of the channel reports followed by the pooled summary."""
    print(f"\n{'='*96}")
    print(f"  CHANNEL KPIs — {table.period_months} month(s) up to {engine.reference_date:%Y-%m-%d}")
    print(f"{'='*96}")
    print(f"  {'Channel':<28} {'Items':>6} {'Δ':>9} {'Views':>12} {'Δ':>9} {'Median':>10} {'Δ':>9} {'/wk':>6}")
    print(f"  {'-'*92}")
    for row in table.rows:
        current = row.current_period.metrics
        name = row.channel_name[:27]
        if row.is_new_channel:
            item_change = views_change = median_change = "NEW"
        else:
            item_change = _change(row.comparison.video_count_change)
            views_change = _change(row.comparison.views_change)
            median_change = _change(row.comparison.median_views_change)
        print(
            f"  {name:<28} {current.item_count:>6} {item_change:>9} {current.total_views:>12} "
            f"{views_change:>9} {current.median_views:>10} {median_change:>9} {row.publish_frequency:>6}"
        )
    print(f"  {'-'*92}")
    pooled = summary.current_period.metrics
    print(
        f"  {'All channels':<28} {pooled.item_count:>6} {_change(summary.comparison.video_count_change):>9} "
        f"{pooled.total_views:>12} {_change(summary.comparison.views_change):>9} "
        f"{pooled.median_views:>10} {_change(summary.comparison.median_views_change):>9}"
    )
    if table.failed_channel_ids:
        print(f"\n  Skipped channels: {', '.join(table.failed_channel_ids)}")
    print(f"{'='*96}\n")


def print_series(engine: KPIEngine, series) -> None:
    """Plain-text bucket listing; projected buckets are marked with '~'."""
    trends = {trend.label: trend for trend in bucket_trends(series, thresholds=engine.thresholds)}
    print(f"\n  SERIES {series.channel_id} ({series.granularity.value}, {series.months} month(s))")
    print(f"  {'Bucket':<10} {'Items':>6} {'Views':>12} {'Median':>10}  Status")
    for bucket in series.buckets:
        marker = "~" if bucket.is_projection else " "
        print(
            f"  {bucket.label:<10} {bucket.count:>6} {marker}{bucket.total_views:>11} "
            f"{bucket.median_views:>10}  {trends[bucket.label].status.value}"
        )
    print()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Period-over-period channel KPI report")
    parser.add_argument("data_dir", help="Directory containing manifest.json and channel files")
    parser.add_argument("--period", type=int, default=1, help="Period length in months (default: 1)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("--series", metavar="CHANNEL_ID", help="Also print the bucketed series of a channel")
    parser.add_argument("--months", type=int, default=6, help="Series window in months (default: 6)")
    args = parser.parse_args(argv)

    configure_logging(stream=sys.stderr)

    try:
        channels, load_report = load_channel_directory(args.data_dir)
    except (OSError, ValueError) as e:
        print(f"Failed to load channels from {args.data_dir}: {e}", file=sys.stderr)
        return 1

    engine = KPIEngine.from_channels(channels)
    try:
        table = engine.channel_table(channels, args.period)
        summary = engine.global_summary(channels, args.period)
        series = None
        if args.series:
            channel = next((ch for ch in channels if ch.channel_id == args.series), None)
            if channel is None:
                print(f"Unknown channel: {args.series}", file=sys.stderr)
                return 1
            series = engine.series(channel, args.months)
    except InvalidArgumentError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.json:
        payload = {
            "reference_date": engine.reference_date.isoformat(),
            "load_report": load_report.model_dump(),
            "table": table.model_dump(mode="json"),
            "summary": summary.model_dump(mode="json"),
        }
        if series is not None:
            payload["series"] = series.model_dump(mode="json")
        print(json.dumps(payload, indent=2))
    else:
        print_table(engine, table, summary)
        if series is not None:
            print_series(engine, series)
    return 0


if __name__ == "__main__":
    sys.exit(main())
