"""Load activity records from activity-store JSON documents and CSV exports."""

from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime
from pathlib import Path

import pandas as pd

from asset_analytics.config import DEFAULT_PRIORITY, DEFAULT_STATUS
from asset_analytics.models.core import ActivityRecord, DowntimeType

logger = logging.getLogger(__name__)


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValueError(f"Missing or invalid activity date: {value!r}")
    # Handle "2024-07-18", "2024-07-18T08:56:41Z" and "2024-07-18T08:56:41.000Z"
    return datetime.fromisoformat(value.strip().rstrip("Z")).date()


def _clean(value) -> str | None:
    """Normalize blanks and NaN (from CSV) to None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def _parse_minutes(value) -> float | None:
    value = _clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        logger.debug("Ignoring non-numeric downtime %r", value)
        return None


def _join_names(value) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v)
    return _clean(value) or ""


def parse_activity(doc: dict) -> ActivityRecord:
    """Build an ActivityRecord from one camelCase activity document.

    Raises:
        ValueError: if the document has no asset id or no usable date.
    """
    asset_id = _clean(doc.get("assetId"))
    if asset_id is None:
        raise ValueError("Activity has no assetId")

    raw_type = _clean(doc.get("downtimeType"))

    return ActivityRecord(
        id=_clean(doc.get("_id", doc.get("id"))) or "",
        asset_id=asset_id,
        date=_parse_date(_clean(doc.get("date"))),
        start_time=_clean(doc.get("startTime")),
        end_time=_clean(doc.get("endTime")),
        downtime=_parse_minutes(doc.get("downtime")),
        downtime_type=DowntimeType.parse(raw_type) if raw_type else None,
        description=_clean(doc.get("natureOfProblem")) or "",
        department=_clean(doc.get("departmentName")) or "",
        attended_by=_join_names(doc.get("attendedByName")),
        status=_clean(doc.get("status")) or DEFAULT_STATUS,
        priority=_clean(doc.get("priority")) or DEFAULT_PRIORITY,
        asset_name=_clean(doc.get("assetName")) or "",
    )


def _read_documents(path: Path) -> list[dict]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path) as f:
            data = json.load(f)
        # API responses wrap the records as {"data": [...]}
        if isinstance(data, dict):
            data = data.get("data", [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of activities in {path}")
        return data
    if suffix == ".csv":
        df = pd.read_csv(path, dtype=str)
        return df.to_dict(orient="records")
    raise ValueError(f"Unsupported activity file type: {path.suffix or path.name}")


def load_activities(path: Path) -> list[ActivityRecord]:
    """Read all activity records from a .json or .csv file.

    Records that cannot be parsed are logged and skipped.
    """
    if not path.exists():
        raise FileNotFoundError(f"Activity file not found at {path}")

    activities = []
    for i, doc in enumerate(_read_documents(path)):
        try:
            activities.append(parse_activity(doc))
        except (ValueError, TypeError, AttributeError) as e:
            logger.error("Error parsing activity #%d in %s: %s", i, path, e)

    logger.info("Loaded %d activities from %s", len(activities), path)
    return activities
