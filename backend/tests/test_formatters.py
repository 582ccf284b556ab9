"""
Tests for display formatters
"""
import math
from datetime import datetime, timezone

from goaltracker.services.formatters import (
    activity_to_view_model,
    format_activity_date,
    format_distance,
    format_duration,
    format_elevation,
    format_pace,
)

from tests.factories import record


class TestFormatters:
    """Formatting of single values"""

    def test_format_distance(self):
        assert format_distance(10230) == "10.2 km"
        assert format_distance(0) == "0.0 km"
        assert format_distance(None) == "0.0 km"
        assert format_distance(math.nan) == "0.0 km"

    def test_format_elevation(self):
        assert format_elevation(84.6) == "85 m"
        assert format_elevation(None) == "0 m"

    def test_format_duration(self):
        assert format_duration("3720s") == "1h 2m"
        assert format_duration("2700 seconds") == "45m"
        assert format_duration(None) == "0m"
        assert format_duration("abc") == "0m"

    def test_format_pace(self):
        assert format_pace(10000, "3000s") == "5:00 /km"
        assert format_pace(5000, "1655s") == "5:31 /km"
        assert format_pace(0, "3000s") == "-"
        assert format_pace(10000, None) == "-"

    def test_format_activity_date(self):
        assert format_activity_date("2025-03-14T17:32:10Z") == "14 Mar 2025, 17:32"
        assert format_activity_date(datetime(2025, 1, 2, 8, 5, tzinfo=timezone.utc)) == "02 Jan 2025, 08:05"
        assert format_activity_date(None) == "No date"
        assert format_activity_date("not a date") == "No date"


class TestActivityViewModel:
    """Flattening an activity for display"""

    def test_full_activity(self):
        activity = record(
            id="5b0f2f9e",
            name="Evening Run",
            sport_type="run",
            type="Run",
            start_date="2025-03-14T17:32:10Z",
            distance=10000,
            moving_time="3000 seconds",
            total_elevation_gain=85,
        )

        assert activity_to_view_model(activity) == {
            "id": "5b0f2f9e",
            "name": "Evening Run",
            "type": "run",
            "start_date": "14 Mar 2025, 17:32",
            "distance": "10.0 km",
            "duration": "50m",
            "elevation": "85 m",
            "pace": "5:00 /km",
        }

    def test_missing_fields_use_placeholders(self):
        view = activity_to_view_model(record(id="x"))

        assert view["name"] == "Untitled activity"
        assert view["type"] == "Unknown type"
        assert view["start_date"] == "No date"
        assert view["pace"] == "-"
