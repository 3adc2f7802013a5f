"""Asset availability analytics: daily metrics, period rollups, downtime breakdowns.

Pure computation over an already-fetched batch of activity records.  Ratios
(availability, MTBF, MTTR) are always recomputed from summed minutes for each
aggregation level rather than averaged from finer-grained percentages.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable

import pandas as pd

from asset_analytics.analysis.downtime import calculate_downtime
from asset_analytics.config import DEFAULT_CONFIG, ONGOING_LABEL, AnalyticsConfig
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
from asset_analytics.models.core import ActivityRecord, DowntimeType

logger = logging.getLogger(__name__)

UNASSIGNED_DEPARTMENT = "Unassigned"

# Columns summed when rolling days up into a period bucket
_SUM_COLUMNS = {
    "total_downtime": "total_downtime_minutes",
    "total_uptime": "total_uptime_minutes",
    "total_operational": "total_operational_minutes",
    "planned_downtime": "planned_downtime_minutes",
    "unplanned_downtime": "unplanned_downtime_minutes",
    "number_of_incidents": "number_of_incidents",
}


def activity_downtime(activity: ActivityRecord) -> float | None:
    """Duration of one activity in minutes.

    A positive precomputed ``downtime`` wins; otherwise the duration is derived
    from the clock times.  None when neither is available (e.g. ongoing events
    or unparseable times).
    """
    if activity.downtime is not None and activity.downtime > 0:
        return activity.downtime
    if activity.start_time and activity.end_time:
        return calculate_downtime(activity.start_time, activity.end_time)
    return None


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value).date()


def _ratios(operational: float, uptime: float, downtime: float, incidents: int) -> tuple[float, float, float]:
    """(availability %, MTBF, MTTR) for one aggregation bucket, in the bucket's units."""
    availability = uptime / operational * 100 if operational > 0 else 100.0
    mtbf = operational / (incidents - 1) if incidents > 1 else operational
    mttr = downtime / incidents if incidents > 0 else 0.0
    return availability, mtbf, mttr


def calculate_day_metrics(day: date, activities: Iterable[ActivityRecord], operational_minutes: int) -> DayMetrics:
    """Metrics for one calendar day from the activities logged on it."""
    activities = list(activities)
    planned = 0.0
    unplanned = 0.0
    durations = []

    for activity in activities:
        minutes = activity_downtime(activity)
        if not minutes:
            continue
        durations.append(minutes)
        if activity.effective_type is DowntimeType.PLANNED:
            planned += minutes
        else:
            unplanned += minutes

    downtime = planned + unplanned
    uptime = max(0.0, operational_minutes - downtime)
    incidents = len(activities)
    availability, mtbf, mttr = _ratios(operational_minutes, uptime, downtime, incidents)
    downtime_pct = downtime / operational_minutes * 100 if operational_minutes > 0 else 0.0
    avg_duration = sum(durations) / len(durations) if durations else 0.0

    return DayMetrics(
        date=day,
        total_operational_minutes=operational_minutes,
        total_downtime_minutes=downtime,
        total_uptime_minutes=uptime,
        planned_downtime_minutes=planned,
        unplanned_downtime_minutes=unplanned,
        uptime_percentage=round(availability, 2),
        downtime_percentage=round(downtime_pct, 2),
        availability=round(availability, 2),
        number_of_incidents=incidents,
        average_incident_duration=round(avg_duration, 2),
        mtbf=round(mtbf, 2),
        mttr=round(mttr, 2),
    )


def summarize(daily: Iterable[DayMetrics]) -> AnalyticsSummary:
    """Period-wide rollup of daily metrics, in hours."""
    daily = list(daily)
    operational = sum(d.total_operational_minutes for d in daily)
    downtime = sum(d.total_downtime_minutes for d in daily)
    uptime = sum(d.total_uptime_minutes for d in daily)
    planned = sum(d.planned_downtime_minutes for d in daily)
    unplanned = sum(d.unplanned_downtime_minutes for d in daily)
    incidents = sum(d.number_of_incidents for d in daily)

    availability, mtbf, mttr = _ratios(operational, uptime, downtime, incidents)
    avg_duration = downtime / incidents if incidents > 0 else 0.0

    return AnalyticsSummary(
        total_operational_hours=round(operational / 60, 2),
        total_downtime_hours=round(downtime / 60, 2),
        total_uptime_hours=round(uptime / 60, 2),
        overall_availability=round(availability, 2),
        planned_downtime_hours=round(planned / 60, 2),
        unplanned_downtime_hours=round(unplanned / 60, 2),
        total_incidents=incidents,
        average_incident_duration=round(avg_duration, 2),
        mtbf=round(mtbf / 60, 2),
        mttr=round(mttr / 60, 2),
    )


def _day_bucket(day: DayMetrics) -> PeriodMetrics:
    return PeriodMetrics(
        period=day.date.strftime("%b %d"),
        start=day.date,
        end=day.date,
        total_downtime=day.total_downtime_minutes,
        total_uptime=day.total_uptime_minutes,
        total_operational=day.total_operational_minutes,
        availability=day.availability,
        planned_downtime=day.planned_downtime_minutes,
        unplanned_downtime=day.unplanned_downtime_minutes,
        number_of_incidents=day.number_of_incidents,
        mtbf=day.mtbf,
        mttr=day.mttr,
    )


def _period_label(period: pd.Period) -> str:
    if period.freqstr.startswith("W"):
        return f"{period.start_time:%b %d} - {period.end_time:%b %d}"
    return f"{period.start_time:%b %Y}"


def calculate_performance_by_period(
    daily: Iterable[DayMetrics],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> tuple[PeriodMetrics, ...]:
    """Bucket daily metrics by day, ISO week (Monday start) or calendar month.

    The granularity follows the span: up to ``daily_bucket_max_days`` days
    keeps one bucket per day, up to ``weekly_bucket_max_days`` groups by week,
    anything longer groups by month.
    """
    daily = list(daily)
    if len(daily) <= config.daily_bucket_max_days:
        return tuple(_day_bucket(day) for day in daily)

    freq = "W-SUN" if len(daily) <= config.weekly_bucket_max_days else "M"

    df = pd.DataFrame([vars(day) for day in daily])
    df["bucket"] = pd.to_datetime(df["date"]).dt.to_period(freq)

    grouped = df.groupby("bucket", sort=True).agg(
        start=("date", "min"),
        end=("date", "max"),
        **{name: (column, "sum") for name, column in _SUM_COLUMNS.items()},
    )

    buckets = []
    for period, row in grouped.iterrows():
        operational = int(row["total_operational"])
        downtime = float(row["total_downtime"])
        uptime = float(row["total_uptime"])
        incidents = int(row["number_of_incidents"])
        availability, mtbf, mttr = _ratios(operational, uptime, downtime, incidents)

        buckets.append(
            PeriodMetrics(
                period=_period_label(period),
                start=row["start"],
                end=row["end"],
                total_downtime=downtime,
                total_uptime=uptime,
                total_operational=operational,
                availability=round(availability, 2),
                planned_downtime=float(row["planned_downtime"]),
                unplanned_downtime=float(row["unplanned_downtime"]),
                number_of_incidents=incidents,
                mtbf=round(mtbf, 2),
                mttr=round(mttr, 2),
            )
        )
    return tuple(buckets)


def to_incident(activity: ActivityRecord) -> DowntimeIncident:
    return DowntimeIncident(
        id=activity.id,
        date=activity.date,
        start_time=activity.start_time,
        end_time=activity.end_time or ONGOING_LABEL,
        duration=activity_downtime(activity) or 0,
        type=activity.effective_type,
        description=activity.description,
        department=activity.department,
        attended_by=activity.attended_by,
        status=activity.status,
        priority=activity.priority,
    )


def _share(part: float, total: float) -> float:
    return round(part / total * 100, 2) if total > 0 else 0.0


def calculate_downtime_breakdown(activities: Iterable[ActivityRecord]) -> DowntimeBreakdown:
    """Planned vs unplanned downtime totals, shares and incident counts."""
    totals = {DowntimeType.PLANNED: 0.0, DowntimeType.UNPLANNED: 0.0}
    counts = {DowntimeType.PLANNED: 0, DowntimeType.UNPLANNED: 0}

    for activity in activities:
        kind = activity.effective_type
        totals[kind] += activity_downtime(activity) or 0
        counts[kind] += 1

    combined = sum(totals.values())
    planned, unplanned = DowntimeType.PLANNED, DowntimeType.UNPLANNED
    return DowntimeBreakdown(
        planned=BreakdownEntry(totals[planned], _share(totals[planned], combined), counts[planned]),
        unplanned=BreakdownEntry(totals[unplanned], _share(totals[unplanned], combined), counts[unplanned]),
    )


def calculate_department_breakdown(activities: Iterable[ActivityRecord]) -> dict[str, BreakdownEntry]:
    """Downtime minutes, incident counts and downtime share per attending department."""
    rows = [
        {"department": a.department or UNASSIGNED_DEPARTMENT, "downtime": activity_downtime(a) or 0}
        for a in activities
    ]
    if not rows:
        return {}

    df = pd.DataFrame(rows)
    per_dept = df.groupby("department", sort=True).agg(
        downtime=("downtime", "sum"),
        incidents=("downtime", "count"),
    )
    combined = float(per_dept["downtime"].sum())

    return {
        str(name): BreakdownEntry(
            total=float(row["downtime"]),
            percentage=_share(float(row["downtime"]), combined),
            incidents=int(row["incidents"]),
        )
        for name, row in per_dept.iterrows()
    }


def calculate_asset_analytics(
    asset_id: str,
    asset_name: str,
    department: str,
    activities: Iterable[ActivityRecord],
    start_date: date | datetime,
    end_date: date | datetime,
    config: AnalyticsConfig | None = None,
) -> AssetAnalytics:
    """Compute uptime/downtime analytics for one asset over an inclusive date range.

    Activities for other assets or outside the range are ignored.  Every
    calendar day in the range gets a DayMetrics entry, including days with no
    logged activity (100% availability).

    Raises:
        ValueError: if ``start_date`` falls after ``end_date``.
    """
    config = config or DEFAULT_CONFIG
    start = _to_date(start_date)
    end = _to_date(end_date)
    if start > end:
        raise ValueError(f"Start date {start} is after end date {end}")

    asset_activities = [a for a in activities if a.asset_id == asset_id and start <= a.date <= end]

    by_day: dict[date, list[ActivityRecord]] = defaultdict(list)
    for activity in asset_activities:
        by_day[activity.date].append(activity)

    total_days = (end - start).days + 1
    days = [start + timedelta(days=i) for i in range(total_days)]
    trends = tuple(calculate_day_metrics(day, by_day.get(day, []), config.operational_minutes) for day in days)
    summary = summarize(trends)

    logger.info(
        "Asset %s: %d activities over %d days (%s to %s), availability %.2f%%",
        asset_id,
        len(asset_activities),
        total_days,
        start,
        end,
        summary.overall_availability,
    )

    return AssetAnalytics(
        asset_id=asset_id,
        asset_name=asset_name,
        department=department,
        analysis_period=AnalysisPeriod(start_date=start, end_date=end, total_days=total_days),
        summary=summary,
        trends=trends,
        performance_by_period=calculate_performance_by_period(trends, config),
        incidents=tuple(to_incident(a) for a in asset_activities),
        downtime_breakdown=calculate_downtime_breakdown(asset_activities),
        department_breakdown=calculate_department_breakdown(asset_activities),
    )
