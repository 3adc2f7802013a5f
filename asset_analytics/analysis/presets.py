"""Named date-range presets for analytics requests."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from enum import Enum


class AnalyticsPreset(Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    THIS_YEAR = "this_year"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: AnalyticsPreset | str | None) -> AnalyticsPreset:
        """Map a raw value to a preset; unknown values become LAST_30_DAYS."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.LAST_30_DAYS


PRESET_LABELS = {
    AnalyticsPreset.TODAY: "Today",
    AnalyticsPreset.YESTERDAY: "Yesterday",
    AnalyticsPreset.LAST_7_DAYS: "Last 7 Days",
    AnalyticsPreset.LAST_30_DAYS: "Last 30 Days",
    AnalyticsPreset.LAST_90_DAYS: "Last 90 Days",
    AnalyticsPreset.THIS_MONTH: "This Month",
    AnalyticsPreset.LAST_MONTH: "Last Month",
    AnalyticsPreset.THIS_QUARTER: "This Quarter",
    AnalyticsPreset.THIS_YEAR: "This Year",
    AnalyticsPreset.CUSTOM: "Custom Range",
}


def _start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo)


def _end_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.max, tzinfo=dt.tzinfo)


def get_date_range_for_preset(
    preset: AnalyticsPreset | str | None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Resolve a preset to a concrete (start, end) pair anchored on ``now``.

    Starts are at midnight and ends at the last microsecond of their day.
    ``custom`` and unknown presets fall back to the last 30 days.
    """
    preset = AnalyticsPreset.parse(preset)
    now = now or datetime.now()
    today = _start_of_day(now)
    end_of_today = _end_of_day(now)

    if preset is AnalyticsPreset.TODAY:
        return today, end_of_today
    if preset is AnalyticsPreset.YESTERDAY:
        yesterday = today - timedelta(days=1)
        return yesterday, _end_of_day(yesterday)
    if preset is AnalyticsPreset.LAST_7_DAYS:
        return today - timedelta(days=6), end_of_today
    if preset is AnalyticsPreset.LAST_90_DAYS:
        return today - timedelta(days=89), end_of_today
    if preset is AnalyticsPreset.THIS_MONTH:
        return today.replace(day=1), end_of_today
    if preset is AnalyticsPreset.LAST_MONTH:
        last_month_end = today.replace(day=1) - timedelta(days=1)
        return last_month_end.replace(day=1), _end_of_day(last_month_end)
    if preset is AnalyticsPreset.THIS_QUARTER:
        quarter_month = (today.month - 1) // 3 * 3 + 1
        return today.replace(month=quarter_month, day=1), end_of_today
    if preset is AnalyticsPreset.THIS_YEAR:
        return today.replace(month=1, day=1), end_of_today

    return today - timedelta(days=29), end_of_today


def format_analytics_preset(preset: AnalyticsPreset | str | None) -> str:
    """Display label for a preset."""
    return PRESET_LABELS[AnalyticsPreset.parse(preset)]
