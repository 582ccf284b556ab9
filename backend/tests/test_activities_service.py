"""
Tests for activity listing and synthetic generation
"""
import random
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from goaltracker.models import Activity, Sport
from goaltracker.schemas.activity import ActivityListQuery, GenerateActivitiesRequest
from goaltracker.services.activities_service import (
    DEFAULT_SPORTS,
    SPORT_PROFILES,
    ActivitiesServiceError,
    activities_service,
    build_activity_name,
    build_synthetic_activities,
    fallback_profile,
    localize_start,
    resolve_generator_config,
)
from goaltracker.services.intervals import parse_interval_to_seconds

from tests.factories import OTHER_USER_ID, USER_ID, make_activity

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestActivityListQuery:
    """Query validation"""

    def test_from_must_precede_to(self):
        with pytest.raises(ValidationError):
            ActivityListQuery(
                from_=datetime(2025, 2, 1, tzinfo=timezone.utc),
                to=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )

    def test_dates_need_timezone(self):
        with pytest.raises(ValidationError):
            ActivityListQuery(from_=datetime(2025, 1, 1))

    def test_limit_bounds(self):
        with pytest.raises(ValidationError):
            ActivityListQuery(limit=101)


class TestListActivities:
    """Listing scoped to the owning user"""

    @pytest.fixture
    def activities(self, db_session):
        rows = [
            make_activity(start_date=datetime(2025, 1, 5, tzinfo=timezone.utc), distance=5000),
            make_activity(start_date=datetime(2025, 2, 5, tzinfo=timezone.utc), distance=20000, sport_type="ride", type="Ride"),
            make_activity(start_date=datetime(2025, 3, 5, tzinfo=timezone.utc), distance=8000),
            make_activity(user_id=OTHER_USER_ID, start_date=datetime(2025, 3, 6, tzinfo=timezone.utc)),
        ]
        db_session.add_all(rows)
        db_session.commit()
        return rows

    def test_default_sort_is_newest_first(self, db_session, activities):
        page = activities_service.list_activities(db_session, USER_ID, ActivityListQuery())

        assert page["total"] == 3
        assert [a.distance for a in page["data"]] == [8000, 20000, 5000]

    def test_filters(self, db_session, activities):
        params = ActivityListQuery(
            from_=datetime(2025, 1, 10, tzinfo=timezone.utc),
            to=datetime(2025, 12, 31, tzinfo=timezone.utc),
            sport_type="run",
        )

        page = activities_service.list_activities(db_session, USER_ID, params)

        assert [a.distance for a in page["data"]] == [8000]

    def test_from_in_other_timezone_is_compared_in_utc(self, db_session, activities):
        params = ActivityListQuery(from_=datetime(2025, 3, 5, 1, 0, tzinfo=ZoneInfo("Europe/Warsaw")))

        page = activities_service.list_activities(db_session, USER_ID, params)

        assert page["total"] == 1

    def test_sort_by_distance(self, db_session, activities):
        page = activities_service.list_activities(
            db_session, USER_ID, ActivityListQuery(sort_by="distance", sort_dir="asc", limit=2)
        )

        assert page["total"] == 3
        assert [a.distance for a in page["data"]] == [5000, 8000]

    def test_missing_user_id(self, db_session):
        with pytest.raises(ActivitiesServiceError):
            activities_service.list_activities(db_session, "", ActivityListQuery())


class TestGeneratorConfig:
    """Merging overrides with defaults"""

    def test_defaults(self):
        config = resolve_generator_config()

        assert config.sports == DEFAULT_SPORTS
        assert config.timezone == "Europe/Warsaw"
        assert config.total == 100

    def test_sports_are_deduplicated_and_padded(self):
        config = resolve_generator_config(GenerateActivitiesRequest(primary_sports=["SUP", "sup", "running"]))

        assert config.sports == ["sup", "running", "cycling", "swimming"]

    def test_sports_are_cut_to_four_slots(self):
        request = GenerateActivitiesRequest(primary_sports=["a", "b", "c", "d", "e"])
        assert resolve_generator_config(request).sports == ["a", "b", "c", "d"]

    def test_distribution_must_sum_to_one(self):
        with pytest.raises(ValidationError):
            GenerateActivitiesRequest(
                distribution={"primary": 0.5, "secondary": 0.5, "tertiary": 0.5, "quaternary": 0}
            )

    def test_invalid_timezone_is_rejected(self):
        with pytest.raises(ValidationError):
            GenerateActivitiesRequest(timezone="Mars/Olympus")


class TestSyntheticActivities:
    """Shape of generated activities"""

    def test_localize_start_uses_training_hours(self):
        zone = ZoneInfo("Europe/Warsaw")
        rng = random.Random(7)
        weekday = datetime(2025, 6, 11, 10, tzinfo=timezone.utc)  # Wednesday
        weekend = datetime(2025, 6, 14, 10, tzinfo=timezone.utc)  # Saturday

        for _ in range(50):
            assert 16 <= localize_start(weekday, zone, rng).hour <= 21
            assert 7 <= localize_start(weekend, zone, rng).hour <= 19

    def test_activity_name_by_hour(self):
        assert build_activity_name("Run", 7) == "Morning Run"
        assert build_activity_name("Run", 12) == "Lunch Run"
        assert build_activity_name("Ride", 17) == "Afternoon Ride"
        assert build_activity_name("Swim", 20) == "Evening Swim"

    def test_fallback_profile_title(self):
        profile = fallback_profile("trail_running")
        assert profile.display_name == "Trail Running"
        assert profile.type == "Workout"

    def test_generated_rows(self):
        config = resolve_generator_config(GenerateActivitiesRequest(timezone="America/New_York"))

        activities = build_synthetic_activities(USER_ID, config, now=NOW, rng=random.Random(42))

        assert len(activities) == 100
        for activity in activities:
            assert activity.user_id == USER_ID
            assert activity.sport_type in config.sports
            assert activity.type == SPORT_PROFILES[activity.sport_type].type
            assert NOW - timedelta(days=366) <= activity.start_date <= NOW + timedelta(days=1)
            local = datetime.fromisoformat(activity.start_date_local)
            assert local == activity.start_date
            assert int(local.utcoffset().total_seconds()) == activity.utc_offset
            assert activity.utc_offset in (-5 * 3600, -4 * 3600)
            assert activity.distance >= 100
            assert parse_interval_to_seconds(activity.moving_time) >= 300
            assert parse_interval_to_seconds(activity.elapsed_time) > parse_interval_to_seconds(activity.moving_time)
            assert activity.total_elevation_gain >= 0

    def test_generation_is_reproducible_with_seed(self):
        config = resolve_generator_config()

        first = build_synthetic_activities(USER_ID, config, now=NOW, rng=random.Random(1))
        second = build_synthetic_activities(USER_ID, config, now=NOW, rng=random.Random(1))

        assert [(a.start_date, a.sport_type, a.distance) for a in first] == [
            (a.start_date, a.sport_type, a.distance) for a in second
        ]


class TestGenerateActivities:
    """Persisted generation"""

    def test_inserts_activities(self, db_session):
        result = activities_service.generate_activities(db_session, USER_ID, now=NOW, rng=random.Random(3))

        assert result == {"created_count": 100}
        assert db_session.query(Activity).filter(Activity.user_id == USER_ID).count() == 100

    def test_catalogue_profile_overrides_builtin(self, db_session):
        db_session.add(Sport(code="rowing", name="Rowing", profile={
            "type": "Rowing",
            "display_name": "Row",
            "distance_km_range": [5, 6],
            "speed_kph_range": [10, 12],
            "elevation_range": [0, 0],
        }))
        db_session.commit()
        request = GenerateActivitiesRequest(
            primary_sports=["rowing"],
            distribution={"primary": 1, "secondary": 0, "tertiary": 0, "quaternary": 0},
        )

        activities_service.generate_activities(db_session, USER_ID, request, now=NOW, rng=random.Random(5))

        rows = db_session.query(Activity).filter(Activity.user_id == USER_ID).all()
        assert {row.sport_type for row in rows} == {"rowing"}
        assert {row.type for row in rows} == {"Rowing"}
        assert all(row.name.endswith(" Row") for row in rows)
        assert all(row.total_elevation_gain == 0 for row in rows)
