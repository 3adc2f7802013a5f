"""Constants and analytics configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

# Assets are assumed schedulable around the clock
STANDARD_OPERATIONAL_HOURS = 24
STANDARD_OPERATIONAL_MINUTES = STANDARD_OPERATIONAL_HOURS * 60

MINUTES_PER_DAY = 24 * 60

# Span thresholds (in days) for adaptive period bucketing
DAILY_BUCKET_MAX_DAYS = 14
WEEKLY_BUCKET_MAX_DAYS = 90

# Upper bound (inclusive, minutes) for each severity level; anything above is critical
SEVERITY_THRESHOLDS = {
    "low": 15,
    "medium": 60,
    "high": 240,
}

ONGOING_LABEL = "Ongoing"

# Defaults applied when loading activity documents
DEFAULT_STATUS = "open"
DEFAULT_PRIORITY = "medium"


@dataclass(frozen=True)
class AnalyticsConfig:
    """Tunable parameters for the analytics aggregator."""

    operational_minutes: int = STANDARD_OPERATIONAL_MINUTES
    daily_bucket_max_days: int = DAILY_BUCKET_MAX_DAYS
    weekly_bucket_max_days: int = WEEKLY_BUCKET_MAX_DAYS

    def __post_init__(self):
        if self.operational_minutes <= 0:
            raise ValueError(f"operational_minutes must be positive, got {self.operational_minutes}")
        if self.daily_bucket_max_days > self.weekly_bucket_max_days:
            raise ValueError("daily_bucket_max_days cannot exceed weekly_bucket_max_days")


DEFAULT_CONFIG = AnalyticsConfig()


def load_config(path: Path) -> AnalyticsConfig:
    """Load an AnalyticsConfig from a YAML file.

    The file holds a flat mapping of AnalyticsConfig field names; omitted
    fields keep their defaults.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(AnalyticsConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

    values = {}
    for key, value in data.items():
        # bool is an int subclass; floats would be silently truncated
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Config key {key} in {path} must be an integer, got {value!r}")
        values[key] = value

    return AnalyticsConfig(**values)
