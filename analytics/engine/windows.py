"""
Time Window Resolver — current and previous period ranges.

Windows are half-open ``[start, end)`` and anchored to a reference date,
normally the freshest publish timestamp in the loaded data so results are
reproducible against a frozen snapshot. Month arithmetic is calendar based:
the day of month is preserved where valid and clamped at month end.
"""

from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

import structlog
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from analytics.engine.errors import InvalidArgumentError
from analytics.models.channels import Channel, ContentItem
from analytics.models.kpis import PeriodWindow, WindowPair

logger = structlog.get_logger()


def coerce_datetime(value, argument: str = "reference_date") -> datetime:
    """
    Convert a date-like value into a timezone-aware datetime.

    Accepts datetime, date (midnight UTC) or ISO-8601 strings. Naive
    values are taken as UTC.

    Raises:
        InvalidArgumentError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            moment = isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise InvalidArgumentError(argument, value, f"malformed date ({e})") from e
    else:
        raise InvalidArgumentError(argument, value, "expected a datetime, date or ISO string")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def validate_period(period_months, argument: str = "period_months") -> int:
    """Ensure a period length is a positive whole number of months."""
    if isinstance(period_months, bool) or not isinstance(period_months, int):
        raise InvalidArgumentError(argument, period_months, "must be an integer number of months")
    if period_months <= 0:
        raise InvalidArgumentError(argument, period_months, "must be positive")
    return period_months


def resolve_reference_date(
    channels: Iterable[Channel],
    now: Optional[datetime] = None,
) -> datetime:
    """
    Latest publish timestamp across all channels.

    Falls back to ``now`` (default: current UTC time) when no channel has
    any item.
    """
    latest: Optional[datetime] = None
    for channel in channels:
        candidate = channel.latest_published_at
        if candidate is not None and (latest is None or candidate > latest):
            latest = candidate

    if latest is None:
        latest = coerce_datetime(now) if now is not None else datetime.now(timezone.utc)
        logger.info("reference_date_fallback", reference_date=latest.isoformat())
    else:
        logger.info("reference_date_resolved", reference_date=latest.isoformat())
    return latest


def resolve_windows(reference_date, period_months: int) -> WindowPair:
    """
    Compute the current window and the equally long window before it.

    Args:
        reference_date: End (exclusive) of the current window
        period_months: Window length in calendar months

    Returns:
        WindowPair where previous.end == current.start

    Raises:
        InvalidArgumentError: If period_months <= 0 or the date is malformed
    """
    period_months = validate_period(period_months)
    end = coerce_datetime(reference_date)
    start = end - relativedelta(months=period_months)
    previous_start = start - relativedelta(months=period_months)

    return WindowPair(
        current=PeriodWindow(start=start, end=end),
        previous=PeriodWindow(start=previous_start, end=start),
        period_months=period_months,
    )


def items_in_window(items: Iterable[ContentItem], window: PeriodWindow) -> list[ContentItem]:
    """Items published inside ``[window.start, window.end)``."""
    return [item for item in items if window.contains(item.published_at)]
