"""Shared fixtures for asset_analytics tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from asset_analytics.models.core import ActivityRecord, DowntimeType

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def activities_json_path():
    return FIXTURES_DIR / "activities.json"


@pytest.fixture
def activities_csv_path():
    return FIXTURES_DIR / "activities.csv"


@pytest.fixture
def make_activity():
    """Factory for ActivityRecords on asset A1 with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(day: date, **kwargs) -> ActivityRecord:
        kwargs.setdefault("id", f"act-{next(counter)}")
        kwargs.setdefault("asset_id", "A1")
        downtime_type = kwargs.get("downtime_type")
        if isinstance(downtime_type, str):
            kwargs["downtime_type"] = DowntimeType.parse(downtime_type)
        return ActivityRecord(date=day, **kwargs)

    return _make
