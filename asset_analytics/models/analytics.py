"""Result models produced by the analytics aggregator.

All results are frozen and derived at call time; ``to_dict`` gives the
camelCase shape consumed by the web API layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping

import pandas as pd

from asset_analytics.models.core import DowntimeType, Severity


@dataclass(frozen=True)
class DayMetrics:
    """Availability metrics for one calendar day (durations in minutes)."""

    date: date
    total_operational_minutes: int
    total_downtime_minutes: float
    total_uptime_minutes: float
    planned_downtime_minutes: float
    unplanned_downtime_minutes: float
    uptime_percentage: float
    downtime_percentage: float
    availability: float
    number_of_incidents: int
    average_incident_duration: float
    mtbf: float
    mttr: float

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "totalOperationalMinutes": self.total_operational_minutes,
            "totalDowntimeMinutes": self.total_downtime_minutes,
            "totalUptimeMinutes": self.total_uptime_minutes,
            "plannedDowntimeMinutes": self.planned_downtime_minutes,
            "unplannedDowntimeMinutes": self.unplanned_downtime_minutes,
            "uptimePercentage": self.uptime_percentage,
            "downtimePercentage": self.downtime_percentage,
            "availability": self.availability,
            "numberOfIncidents": self.number_of_incidents,
            "averageIncidentDuration": self.average_incident_duration,
            "mtbf": self.mtbf,
            "mttr": self.mttr,
        }


@dataclass(frozen=True)
class PeriodMetrics:
    """Aggregated metrics for one day, ISO week or calendar month bucket."""

    period: str  # display label, e.g. "Mar 04 - Mar 10"
    start: date
    end: date
    total_downtime: float
    total_uptime: float
    total_operational: int
    availability: float
    planned_downtime: float
    unplanned_downtime: float
    number_of_incidents: int
    mtbf: float
    mttr: float

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "totalDowntime": self.total_downtime,
            "totalUptime": self.total_uptime,
            "availability": self.availability,
            "plannedDowntime": self.planned_downtime,
            "unplannedDowntime": self.unplanned_downtime,
            "numberOfIncidents": self.number_of_incidents,
            "mtbf": self.mtbf,
            "mttr": self.mttr,
        }


@dataclass(frozen=True)
class DowntimeIncident:
    """One source activity presented as a downtime incident."""

    id: str
    date: date
    start_time: str | None
    end_time: str  # "Ongoing" when the activity is still open
    duration: float  # minutes, 0 when not computable
    type: DowntimeType
    description: str = ""
    department: str = ""
    attended_by: str = ""
    status: str = ""
    priority: str = ""

    @property
    def severity(self) -> Severity:
        from asset_analytics.analysis.downtime import get_downtime_severity

        return get_downtime_severity(self.duration)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "type": self.type.value,
            "description": self.description,
            "department": self.department,
            "attendedBy": self.attended_by,
            "status": self.status,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class AnalysisPeriod:
    start_date: date
    end_date: date
    total_days: int

    def to_dict(self) -> dict:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalDays": self.total_days,
        }


@dataclass(frozen=True)
class AnalyticsSummary:
    """Period-wide rollup. Durations in hours except average_incident_duration (minutes)."""

    total_operational_hours: float
    total_downtime_hours: float
    total_uptime_hours: float
    overall_availability: float
    planned_downtime_hours: float
    unplanned_downtime_hours: float
    total_incidents: int
    average_incident_duration: float
    mtbf: float
    mttr: float

    def to_dict(self) -> dict:
        return {
            "totalOperationalHours": self.total_operational_hours,
            "totalDowntimeHours": self.total_downtime_hours,
            "totalUptimeHours": self.total_uptime_hours,
            "overallAvailability": self.overall_availability,
            "plannedDowntimeHours": self.planned_downtime_hours,
            "unplannedDowntimeHours": self.unplanned_downtime_hours,
            "totalIncidents": self.total_incidents,
            "averageIncidentDuration": self.average_incident_duration,
            "mtbf": self.mtbf,
            "mttr": self.mttr,
        }


@dataclass(frozen=True)
class BreakdownEntry:
    total: float  # minutes
    percentage: float
    incidents: int

    def to_dict(self) -> dict:
        return {"total": self.total, "percentage": self.percentage, "incidents": self.incidents}


@dataclass(frozen=True)
class DowntimeBreakdown:
    planned: BreakdownEntry
    unplanned: BreakdownEntry

    @property
    def total(self) -> float:
        return self.planned.total + self.unplanned.total

    def to_dict(self) -> dict:
        return {"planned": self.planned.to_dict(), "unplanned": self.unplanned.to_dict()}


@dataclass(frozen=True)
class AssetAnalytics:
    """Complete uptime/downtime analysis of one asset over one period."""

    asset_id: str
    asset_name: str
    department: str
    analysis_period: AnalysisPeriod
    summary: AnalyticsSummary
    trends: tuple[DayMetrics, ...]
    performance_by_period: tuple[PeriodMetrics, ...]
    incidents: tuple[DowntimeIncident, ...]
    downtime_breakdown: DowntimeBreakdown
    department_breakdown: Mapping[str, BreakdownEntry] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "department_breakdown", MappingProxyType(dict(self.department_breakdown)))

    def trends_frame(self) -> pd.DataFrame:
        """Daily trends as a DataFrame indexed by date."""
        if not self.trends:
            return pd.DataFrame()
        df = pd.DataFrame([vars(day) for day in self.trends])
        return df.set_index("date")

    def to_dict(self) -> dict:
        return {
            "assetId": self.asset_id,
            "assetName": self.asset_name,
            "department": self.department,
            "analysisPeriod": self.analysis_period.to_dict(),
            "summary": self.summary.to_dict(),
            "trends": [day.to_dict() for day in self.trends],
            "performanceByPeriod": [p.to_dict() for p in self.performance_by_period],
            "incidents": [i.to_dict() for i in self.incidents],
            "downtimeBreakdown": self.downtime_breakdown.to_dict(),
            "departmentBreakdown": {
                name: {"downtime": entry.total, "incidents": entry.incidents, "percentage": entry.percentage}
                for name, entry in self.department_breakdown.items()
            },
        }
