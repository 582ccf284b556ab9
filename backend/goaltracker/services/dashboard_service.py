"""Dashboard aggregation service.

Folds a user's activities into per-scope totals, evaluates which goals are
achieved against those totals, and counts activities per sport for the
dashboard breakdown lists.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.exceptions import ErrorCodes, ServiceError
from goaltracker.models.activity import Activity
from goaltracker.models.goal import Goal, MetricType, ScopeType
from goaltracker.models.sport import Sport
from goaltracker.services.activity_metrics import (
    extract_metric_value,
    normalize_code,
    normalize_sport_code,
    parse_start_date,
)
from goaltracker.services.progress_service import SECONDS_PER_HOUR

logger = logging.getLogger(__name__)


class DashboardServiceError(ServiceError):
    """Exception raised when dashboard data cannot be loaded."""

    VALIDATION_ERROR = f"DASHBOARD_{ErrorCodes.VALIDATION_ERROR}"
    DATABASE_ERROR = f"DASHBOARD_{ErrorCodes.DATABASE_ERROR}"


@dataclass
class MetricTotals:
    """Summed distance (m), moving time (s) and elevation gain (m)."""

    distance: float = 0
    time: float = 0
    elevation_gain: float = 0

    def add(self, distance: float, time: float, elevation_gain: float) -> None:
        self.distance += distance
        self.time += time
        self.elevation_gain += elevation_gain

    def get(self, metric: MetricType) -> float:
        return getattr(self, MetricType(metric).value)


@dataclass
class ActivityTotals:
    """Global totals plus one bucket per normalized sport code."""

    global_totals: MetricTotals = field(default_factory=MetricTotals)
    by_sport: dict[str, MetricTotals] = field(default_factory=dict)


@dataclass
class SportsLookup:
    """Sport catalogue indexed by id, plus code -> display name."""

    by_id: dict[str, Any] = field(default_factory=dict)
    code_to_name: dict[str, str] = field(default_factory=dict)


def build_activity_totals(activities: Iterable[Any]) -> ActivityTotals:
    """
    Sum distance, moving time and elevation gain globally and per sport.

    Activities without a usable sport code only count towards the global
    totals. Iteration order does not affect the result.
    """
    totals = ActivityTotals()

    for activity in activities:
        code = normalize_sport_code(activity)
        distance = extract_metric_value(activity, MetricType.DISTANCE)
        time = extract_metric_value(activity, MetricType.TIME)
        elevation_gain = extract_metric_value(activity, MetricType.ELEVATION_GAIN)

        totals.global_totals.add(distance, time, elevation_gain)

        if not code:
            continue

        bucket = totals.by_sport.setdefault(code, MetricTotals())
        bucket.add(distance, time, elevation_gain)

    return totals


def build_sports_lookup(sports: Iterable[Any]) -> SportsLookup:
    """Index sports by id and map normalized codes to display names."""
    lookup = SportsLookup()
    for sport in sports:
        lookup.by_id[str(sport.id)] = sport
        code = normalize_code(sport.code)
        if code:
            lookup.code_to_name[code] = sport.name
    return lookup


def _valid_target(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _coerce_enum(enum_cls, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _resolve_goal_sport_bucket(
    goal: Any,
    totals: ActivityTotals,
    sports_lookup: SportsLookup,
) -> Optional[MetricTotals]:
    """
    Find the per-sport bucket a goal refers to.

    The sport id is first resolved to a code through the catalogue; if that
    fails to match a bucket, the raw id itself is tried as a code.
    """
    sport_id = goal.sport_id
    if not sport_id:
        return None
    sport_id = str(sport_id)

    sport = sports_lookup.by_id.get(sport_id)
    preferred_code = normalize_code(sport.code if sport is not None else sport_id)
    if preferred_code and preferred_code in totals.by_sport:
        return totals.by_sport[preferred_code]

    fallback_code = normalize_code(sport_id)
    if fallback_code and fallback_code in totals.by_sport:
        return totals.by_sport[fallback_code]

    return None


def is_goal_achieved(goal: Any, totals: ActivityTotals, sports_lookup: SportsLookup) -> bool:
    """
    Decide whether a goal's target has been reached.

    Time targets are stored in hours and compared against totals in seconds.
    Goals with a missing, non-finite or non-positive target are never
    achieved.

    Args:
        goal: Goal record exposing scope_type, metric_type, target_value, sport_id
        totals: Totals from ``build_activity_totals``
        sports_lookup: Catalogue from ``build_sports_lookup``

    Returns:
        True when the relevant total is at least the target
    """
    if goal is None or not _valid_target(goal.target_value):
        return False

    metric = _coerce_enum(MetricType, goal.metric_type)
    scope = _coerce_enum(ScopeType, goal.scope_type)
    if metric is None or scope is None:
        return False

    target = goal.target_value * SECONDS_PER_HOUR if metric is MetricType.TIME else goal.target_value

    if scope is ScopeType.GLOBAL:
        return totals.global_totals.get(metric) >= target

    bucket = _resolve_goal_sport_bucket(goal, totals, sports_lookup)
    if bucket is None:
        return False
    return bucket.get(metric) >= target


def count_by_sport(
    activities: Iterable[Any],
    sport_names: Optional[dict[str, str]] = None,
) -> list[dict[str, Any]]:
    """
    Count activities per normalized sport code.

    Labels are ``"<Name> (<code>)"`` when the code has a known name, else the
    bare code. Sorted by count descending, then label ascending ignoring case.
    """
    sport_names = sport_names or {}
    counts: dict[str, int] = {}

    for activity in activities:
        code = normalize_sport_code(activity)
        if not code:
            continue
        counts[code] = counts.get(code, 0) + 1

    items = []
    for code, count in counts.items():
        name = sport_names.get(code)
        label = f"{name} ({code})" if name else code
        items.append({"sport": label, "count": count})

    return sorted(items, key=lambda item: (-item["count"], item["sport"].casefold(), item["sport"]))


def group_activities_by_sport(activities: Iterable[Any]) -> dict[str, list[Any]]:
    """Group activities by normalized sport code, skipping empty codes."""
    groups: dict[str, list[Any]] = {}
    for activity in activities:
        code = normalize_sport_code(activity)
        if not code:
            continue
        groups.setdefault(code, []).append(activity)
    return groups


def _in_period(value: Any, year: int, month: Optional[int] = None) -> bool:
    started = parse_start_date(value)
    if started is None or started.year != year:
        return False
    return month is None or started.month == month


def build_dashboard_metrics(
    goals: list[Any],
    activities: Iterable[Any],
    sports: Iterable[Any],
    year: int,
    month: int,
) -> dict[str, Any]:
    """
    Build the dashboard summary for one UTC year and month.

    Args:
        goals: The user's goals
        activities: The user's activities (any period; filtered here)
        sports: Sport catalogue
        year: Calendar year
        month: Calendar month (1-12)

    Returns:
        Dict with total_goals, achieved_goals, activities_month and
        activities_year breakdowns
    """
    activities_year = [
        activity for activity in activities
        if _in_period(getattr(activity, "start_date", None), year)
    ]
    activities_month = [
        activity for activity in activities_year
        if _in_period(getattr(activity, "start_date", None), year, month)
    ]

    totals = build_activity_totals(activities_year)
    sports_lookup = build_sports_lookup(sports)
    achieved_goals = sum(1 for goal in goals if is_goal_achieved(goal, totals, sports_lookup))

    return {
        "total_goals": len(goals),
        "achieved_goals": achieved_goals,
        "activities_month": count_by_sport(activities_month, sports_lookup.code_to_name),
        "activities_year": count_by_sport(activities_year, sports_lookup.code_to_name),
    }


class DashboardService:
    """Load a user's records and build dashboard metrics from them."""

    def get_dashboard_metrics(
        self,
        db: Session,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> dict[str, Any]:
        """
        Dashboard metrics for the current UTC year and month.

        Raises:
            DashboardServiceError: If the user ID is missing or a query fails
        """
        if not user_id:
            raise DashboardServiceError(
                DashboardServiceError.VALIDATION_ERROR,
                "userId is required to load dashboard metrics",
            )

        now = now or datetime.now(timezone.utc)
        range_start = datetime(now.year, 1, 1, tzinfo=timezone.utc)
        range_end = datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)

        try:
            goals = (
                db.query(Goal)
                .filter(Goal.user_id == user_id)
                .order_by(Goal.created_at.desc())
                .all()
            )
            activities = (
                db.query(Activity)
                .filter(
                    Activity.user_id == user_id,
                    Activity.start_date >= range_start,
                    Activity.start_date < range_end,
                )
                .order_by(Activity.start_date.asc())
                .all()
            )
            sports = db.query(Sport).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load dashboard data for user {user_id}: {e}")
            raise DashboardServiceError(
                DashboardServiceError.DATABASE_ERROR,
                "Unable to load dashboard data",
                {"originalError": str(e)},
            )

        return build_dashboard_metrics(goals, activities, sports, now.year, now.month)


# Create a singleton instance for convenience
dashboard_service = DashboardService()
