"""Downtime primitives: incident duration from clock times, formatting, severity."""

from __future__ import annotations

import logging
import re

from asset_analytics.config import MINUTES_PER_DAY, SEVERITY_THRESHOLDS
from asset_analytics.models.core import DowntimeType, Severity

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def calculate_downtime(start_time: str | None, end_time: str | None = None) -> int | None:
    """Minutes between two "HH:MM" clock times.

    Returns None while the event is open (no end time) or when either time
    cannot be parsed. An end time earlier than the start is taken to be on
    the following day; spans longer than one overnight wrap are not modelled.
    """
    if not start_time or not end_time:
        return None

    try:
        start = time_to_minutes(start_time)
        end = time_to_minutes(end_time)
    except (ValueError, TypeError, AttributeError) as e:
        logger.debug("Could not calculate downtime from %r to %r: %s", start_time, end_time, e)
        return None

    if end < start:
        end += MINUTES_PER_DAY
    return end - start


def format_downtime(minutes: float | None) -> str:
    """Human-readable duration, e.g. "2h 30m", "45m", "1d 3h 15m"."""
    if minutes is None:
        return "Not calculated"
    if minutes == 0:
        return "No downtime"

    total = int(round(minutes))
    days, rest = divmod(total, MINUTES_PER_DAY)
    hours, mins = divmod(rest, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if mins > 0 or not parts:
        parts.append(f"{mins}m")
    return " ".join(parts)


def get_downtime_severity(minutes: float | None) -> Severity:
    """Presentation severity of a downtime duration."""
    if minutes is None or minutes <= SEVERITY_THRESHOLDS["low"]:
        return Severity.LOW
    if minutes <= SEVERITY_THRESHOLDS["medium"]:
        return Severity.MEDIUM
    if minutes <= SEVERITY_THRESHOLDS["high"]:
        return Severity.HIGH
    return Severity.CRITICAL


def downtime_type_label(downtime_type: DowntimeType | str | None) -> str:
    if downtime_type is None:
        return "Not Set"
    if isinstance(downtime_type, str):
        try:
            downtime_type = DowntimeType(downtime_type.strip().lower())
        except ValueError:
            return "Not Set"
    return downtime_type.label


def is_valid_time_format(time: str) -> bool:
    """True for 24-hour "H:MM" / "HH:MM" strings."""
    if not isinstance(time, str):
        return False
    return _TIME_RE.match(time) is not None


def minutes_to_time(minutes: int) -> str:
    """Zero-padded "HH:MM"; values of a day or more are not wrapped."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def time_to_minutes(time: str) -> int:
    """Minutes since midnight for an "HH:MM" string (no modulo 1440).

    Raises ValueError when the string is not two colon-separated integers.
    """
    hours, mins = time.strip().split(":")
    return int(hours) * 60 + int(mins)
