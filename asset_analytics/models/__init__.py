"""Data models for activity records and analytics results."""

from asset_analytics.models.analytics import (
    AnalysisPeriod,
    AnalyticsSummary,
    AssetAnalytics,
    BreakdownEntry,
    DayMetrics,
    DowntimeBreakdown,
    DowntimeIncident,
    PeriodMetrics,
)
from asset_analytics.models.core import ActivityRecord, DowntimeType, Severity

__all__ = [
    "ActivityRecord",
    "DowntimeType",
    "Severity",
    "DayMetrics",
    "PeriodMetrics",
    "DowntimeIncident",
    "AnalysisPeriod",
    "AnalyticsSummary",
    "BreakdownEntry",
    "DowntimeBreakdown",
    "AssetAnalytics",
]
