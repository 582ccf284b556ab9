"""Per-activity metric extraction and normalization helpers.

All functions here are total: malformed fields produce a neutral value
(0, empty string or None) instead of raising, so one bad row never aborts
an aggregation.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Optional

from goaltracker.models.goal import MetricType
from goaltracker.services.intervals import parse_interval_to_seconds


def finite_number(value: Any) -> float:
    """Return ``value`` if it is a finite number, else 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value if math.isfinite(value) else 0


def extract_metric_value(activity: Any, metric: MetricType) -> float:
    """
    Return one activity's contribution to the given metric.

    Args:
        activity: Activity record exposing ``distance``, ``moving_time`` and
            ``total_elevation_gain``
        metric: Metric kind to extract

    Returns:
        Meters for distance and elevation gain, seconds for time
    """
    metric = MetricType(metric)
    if metric is MetricType.DISTANCE:
        return finite_number(getattr(activity, "distance", None))
    if metric is MetricType.TIME:
        return parse_interval_to_seconds(getattr(activity, "moving_time", None))
    if metric is MetricType.ELEVATION_GAIN:
        return finite_number(getattr(activity, "total_elevation_gain", None))
    raise ValueError(f"Unsupported metric type: {metric!r}")


def normalize_code(value: Any) -> str:
    """Lower-case and trim a sport code; non-strings normalize to ''."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def normalize_sport_code(activity: Any) -> str:
    """Sport code of an activity, falling back to its generic type."""
    sport_type = getattr(activity, "sport_type", None)
    if sport_type is None:
        sport_type = getattr(activity, "type", None)
    return normalize_code(sport_type)


def parse_start_date(value: Any) -> Optional[datetime]:
    """
    Parse an activity start timestamp into an aware UTC datetime.

    Accepts datetimes, dates and ISO 8601 strings. Naive values are taken
    as UTC. Returns None when the value cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00").replace("z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_date_key(value: Any) -> Optional[str]:
    """UTC calendar day (``YYYY-MM-DD``) of a start timestamp, or None."""
    parsed = parse_start_date(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()
