"""
Tests for totals aggregation, goal evaluation and sport breakdowns
"""
import copy
import math
from datetime import datetime, timezone

import pytest

from goaltracker.models import MetricType, ScopeType
from goaltracker.services.dashboard_service import (
    ActivityTotals,
    DashboardServiceError,
    MetricTotals,
    build_activity_totals,
    build_dashboard_metrics,
    build_sports_lookup,
    count_by_sport,
    dashboard_service,
    group_activities_by_sport,
    is_goal_achieved,
)

from tests.factories import OTHER_USER_ID, USER_ID, make_activity, make_goal, record

RUN_ID = "9a1b2c3d-0000-4000-8000-000000000001"


def goal(scope_type="global", metric_type="distance", target_value=15000, sport_id=None):
    return record(scope_type=scope_type, metric_type=metric_type, target_value=target_value, sport_id=sport_id)


class TestBuildActivityTotals:
    """Global and per-sport folding"""

    def test_sums_globally_and_per_sport(self):
        activities = [
            record(sport_type="Run ", distance=1000, moving_time="00:10:00", total_elevation_gain=5),
            record(sport_type="run", distance=2000, moving_time="PT300S", total_elevation_gain=10),
            record(sport_type=None, type="Ride", distance=5000, moving_time="600 seconds", total_elevation_gain=50),
        ]

        totals = build_activity_totals(activities)

        assert totals.global_totals == MetricTotals(distance=8000, time=1500, elevation_gain=65)
        assert totals.by_sport["run"] == MetricTotals(distance=3000, time=900, elevation_gain=15)
        assert totals.by_sport["ride"] == MetricTotals(distance=5000, time=600, elevation_gain=50)

    def test_empty_code_only_counts_globally(self):
        activities = [
            record(sport_type="   ", distance=100),
            record(sport_type=None, type=None, distance=200),
            record(sport_type=42, distance=300),
        ]

        totals = build_activity_totals(activities)

        assert totals.global_totals.distance == 600
        assert totals.by_sport == {}

    def test_malformed_numbers_count_as_zero(self):
        activities = [record(sport_type="run", distance=math.inf, moving_time=None, total_elevation_gain="high")]

        totals = build_activity_totals(activities)

        assert totals.by_sport["run"] == MetricTotals()

    def test_idempotent(self):
        activities = [
            record(sport_type="run", distance=1000.5, moving_time="00:10:00", total_elevation_gain=5),
            record(sport_type="swim", distance=750, moving_time="900s", total_elevation_gain=0),
        ]
        snapshot = copy.deepcopy(activities)

        first = build_activity_totals(activities)
        second = build_activity_totals(activities)

        assert first == second
        assert activities == snapshot


class TestIsGoalAchieved:
    """Goal evaluation against precomputed totals"""

    def totals(self, **by_sport):
        return ActivityTotals(global_totals=MetricTotals(distance=20000), by_sport=by_sport)

    def test_global_distance_goal(self):
        lookup = build_sports_lookup([])

        assert is_goal_achieved(goal(target_value=15000), self.totals(), lookup) is True
        low = ActivityTotals(global_totals=MetricTotals(distance=14000))
        assert is_goal_achieved(goal(target_value=15000), low, lookup) is False

    def test_target_equal_to_total_is_achieved(self):
        assert is_goal_achieved(goal(target_value=20000), self.totals(), build_sports_lookup([])) is True

    def test_time_target_is_in_hours(self):
        sports = [record(id=RUN_ID, code="run", name="Running")]
        totals = self.totals(run=MetricTotals(time=3600))
        time_goal = goal(scope_type="per_sport", metric_type="time", target_value=1, sport_id=RUN_ID)

        assert is_goal_achieved(time_goal, totals, build_sports_lookup(sports)) is True

    def test_per_sport_resolves_id_through_catalogue(self):
        sports = [record(id=RUN_ID, code=" RUN ", name="Running")]
        totals = self.totals(run=MetricTotals(elevation_gain=500))
        elevation_goal = goal(scope_type="per_sport", metric_type="elevation_gain", target_value=400, sport_id=RUN_ID)

        assert is_goal_achieved(elevation_goal, totals, build_sports_lookup(sports)) is True

    def test_per_sport_falls_back_to_raw_identifier(self):
        """A sport code passed as the sport_id still matches its bucket"""
        totals = self.totals(run=MetricTotals(distance=5000))
        raw_goal = goal(scope_type="per_sport", target_value=5000, sport_id="Run")

        assert is_goal_achieved(raw_goal, totals, build_sports_lookup([])) is True

    def test_per_sport_falls_back_when_catalogue_code_has_no_bucket(self):
        sports = [record(id="run", code="trail_run", name="Trail")]
        totals = self.totals(run=MetricTotals(distance=5000))
        raw_goal = goal(scope_type="per_sport", target_value=5000, sport_id="run")

        assert is_goal_achieved(raw_goal, totals, build_sports_lookup(sports)) is True

    def test_per_sport_without_bucket_is_not_achieved(self):
        sports = [record(id=RUN_ID, code="run", name="Running")]
        sport_goal = goal(scope_type="per_sport", target_value=1, sport_id=RUN_ID)

        assert is_goal_achieved(sport_goal, self.totals(), build_sports_lookup(sports)) is False

    @pytest.mark.parametrize("target_value", [None, 0, -5, math.nan, math.inf, "100", True])
    def test_invalid_target_is_not_achieved(self, target_value):
        assert is_goal_achieved(goal(target_value=target_value), self.totals(), build_sports_lookup([])) is False

    def test_unknown_metric_or_scope_is_not_achieved(self):
        lookup = build_sports_lookup([])
        assert is_goal_achieved(goal(metric_type="calories"), self.totals(), lookup) is False
        assert is_goal_achieved(goal(scope_type="team"), self.totals(), lookup) is False

    def test_missing_goal(self):
        assert is_goal_achieved(None, self.totals(), build_sports_lookup([])) is False


class TestCountBySport:
    """Per-sport activity counts"""

    def test_labels_and_ordering(self):
        activities = [record(sport_type="bike"), record(sport_type="run"), record(sport_type="run")]

        breakdown = count_by_sport(activities, {"run": "Bieganie"})

        assert breakdown == [
            {"sport": "Bieganie (run)", "count": 2},
            {"sport": "bike", "count": 1},
        ]

    def test_ties_sorted_by_label(self):
        activities = [record(sport_type="swim"), record(sport_type="hike"), record(sport_type="bike")]

        breakdown = count_by_sport(activities)

        assert [item["sport"] for item in breakdown] == ["bike", "hike", "swim"]

    def test_tie_order_ignores_case_of_labels(self):
        activities = [record(sport_type="zumba"), record(sport_type="bike")]

        breakdown = count_by_sport(activities, {"zumba": "Zumba"})

        assert [item["sport"] for item in breakdown] == ["bike", "Zumba (zumba)"]

    def test_empty_codes_are_skipped(self):
        activities = [record(sport_type=""), record(sport_type=None, type=None), record(sport_type="RUN")]

        assert count_by_sport(activities) == [{"sport": "run", "count": 1}]

    def test_group_activities_by_sport(self):
        run_a, run_b, ride = record(sport_type="run"), record(sport_type=" Run"), record(sport_type=None, type="Ride")

        groups = group_activities_by_sport([run_a, ride, run_b, record(sport_type="")])

        assert groups == {"run": [run_a, run_b], "ride": [ride]}


class TestBuildDashboardMetrics:
    """Dashboard summary for one year and month"""

    def test_counts_and_breakdowns(self):
        sports = [record(id=RUN_ID, code="run", name="Running")]
        goals = [
            goal(target_value=3000),
            goal(scope_type="per_sport", target_value=10000, sport_id=RUN_ID),
        ]
        activities = [
            record(sport_type="run", start_date="2025-03-02T08:00:00Z", distance=2000),
            record(sport_type="ride", start_date="2025-02-10T08:00:00Z", distance=1500),
            record(sport_type="run", start_date="2024-03-02T08:00:00Z", distance=99999),
            record(sport_type="run", start_date="garbage", distance=99999),
        ]

        metrics = build_dashboard_metrics(goals, activities, sports, year=2025, month=3)

        assert metrics == {
            "total_goals": 2,
            "achieved_goals": 1,
            "activities_month": [{"sport": "Running (run)", "count": 1}],
            "activities_year": [
                {"sport": "Running (run)", "count": 1},
                {"sport": "ride", "count": 1},
            ],
        }


class TestDashboardService:
    """Dashboard metrics loaded from the database"""

    def test_metrics_for_current_month(self, db_session, sports):
        run = sports["run"]
        db_session.add_all([
            make_goal(target_value=15000),
            make_goal(scope_type=ScopeType.PER_SPORT, sport_id=run.id, metric_type=MetricType.TIME, target_value=5),
            make_goal(user_id=OTHER_USER_ID, target_value=1),
            make_activity(start_date=datetime(2025, 3, 3, tzinfo=timezone.utc), distance=10000),
            make_activity(start_date=datetime(2025, 1, 3, tzinfo=timezone.utc), distance=10000, sport_type="ride"),
            make_activity(start_date=datetime(2024, 3, 3, tzinfo=timezone.utc), distance=50000),
        ])
        db_session.commit()

        metrics = dashboard_service.get_dashboard_metrics(
            db_session, USER_ID, now=datetime(2025, 3, 20, tzinfo=timezone.utc)
        )

        assert metrics["total_goals"] == 2
        assert metrics["achieved_goals"] == 1
        assert metrics["activities_month"] == [{"sport": "Running (run)", "count": 1}]
        assert metrics["activities_year"] == [
            {"sport": "Cycling (ride)", "count": 1},
            {"sport": "Running (run)", "count": 1},
        ]

    def test_missing_user_id(self, db_session):
        with pytest.raises(DashboardServiceError):
            dashboard_service.get_dashboard_metrics(db_session, "")
