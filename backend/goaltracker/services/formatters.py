"""Display formatting for activity lists."""

import math
from typing import Any, Optional

from goaltracker.services.activity_metrics import parse_start_date
from goaltracker.services.intervals import parse_duration_to_seconds

NO_DATE = "No date"
NO_PACE = "-"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def format_activity_date(value: Any) -> str:
    """Format a start timestamp as ``"14 Mar 2025, 17:32"`` (UTC)."""
    parsed = parse_start_date(value)
    if parsed is None:
        return NO_DATE
    return parsed.strftime("%d %b %Y, %H:%M")


def format_distance(meters: Optional[float]) -> str:
    """Meters as kilometers with one decimal, e.g. ``"10.2 km"``."""
    if not _is_number(meters):
        return "0.0 km"
    return f"{meters / 1000:.1f} km"


def format_elevation(meters: Optional[float]) -> str:
    if not _is_number(meters):
        return "0 m"
    return f"{round(meters)} m"


def format_duration(duration: Any) -> str:
    """``"<N>s"``-style duration as ``"Xh Ym"``, or ``"Ym"`` under an hour."""
    total_seconds = parse_duration_to_seconds(duration)
    if total_seconds <= 0:
        return "0m"

    hours, remainder = divmod(total_seconds, 3600)
    minutes = remainder // 60
    if hours <= 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def format_pace(meters: Optional[float], duration: Any) -> str:
    """Pace per kilometer as ``"m:ss /km"``."""
    total_seconds = parse_duration_to_seconds(duration)
    if not _is_number(meters) or meters <= 0 or total_seconds <= 0:
        return NO_PACE

    pace_seconds = total_seconds / (meters / 1000)
    minutes = int(pace_seconds // 60)
    seconds = round(pace_seconds % 60)
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return f"{minutes}:{seconds:02d} /km"


def activity_to_view_model(activity: Any) -> dict[str, Any]:
    """
    Flatten an activity into display strings.

    Durations here go through the digit-strip parser, which is only correct
    for ``"<N>s"`` / ``"<N> seconds"`` values.
    """
    name = getattr(activity, "name", None)
    sport = getattr(activity, "sport_type", None) or getattr(activity, "type", None)
    distance = getattr(activity, "distance", None)
    moving_time = getattr(activity, "moving_time", None)

    return {
        "id": getattr(activity, "id", None),
        "name": name or "Untitled activity",
        "type": sport or "Unknown type",
        "start_date": format_activity_date(getattr(activity, "start_date", None)),
        "distance": format_distance(distance),
        "duration": format_duration(moving_time),
        "elevation": format_elevation(getattr(activity, "total_elevation_gain", None)),
        "pace": format_pace(distance, moving_time),
    }
