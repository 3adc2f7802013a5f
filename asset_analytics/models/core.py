"""Core input models: maintenance activity records and their enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from asset_analytics.config import DEFAULT_PRIORITY, DEFAULT_STATUS


class DowntimeType(Enum):
    PLANNED = "planned"
    UNPLANNED = "unplanned"

    @classmethod
    def parse(cls, value: DowntimeType | str | None) -> DowntimeType:
        """Map a raw value to a DowntimeType; anything unrecognised counts as unplanned."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.PLANNED.value:
            return cls.PLANNED
        return cls.UNPLANNED

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ActivityRecord:
    """A logged maintenance event or incident against one asset."""

    id: str
    asset_id: str
    date: date
    start_time: str | None = None  # "HH:MM"
    end_time: str | None = None  # "HH:MM", None while the event is still open
    downtime: float | None = None  # precomputed minutes
    downtime_type: DowntimeType | None = None
    description: str = ""  # nature of problem
    department: str = ""
    attended_by: str = ""
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    asset_name: str = ""

    def __post_init__(self):
        # timestamps from the activity store count on their calendar day
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())

    @property
    def is_ongoing(self) -> bool:
        """Started but not yet closed; contributes no duration."""
        return bool(self.start_time) and not self.end_time

    @property
    def effective_type(self) -> DowntimeType:
        return DowntimeType.parse(self.downtime_type)
