"""Annual progress calculation service.

This service turns raw activities into a day-by-day cumulative series for one
metric and one calendar year:

1. Every activity is bucketed by the UTC calendar day of its start time
2. Each day's contributions are summed (negative/non-finite values dropped)
3. Every calendar day from Jan 1 to the end boundary is walked in order,
   emitting the running total, so days without activity still get a point

Past years end on Dec 31. The current year ends on "today", which can be
injected to keep the calculation deterministic.
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.exceptions import ErrorCodes, ServiceError
from goaltracker.models.activity import Activity
from goaltracker.models.goal import Goal, MetricType, ScopeType
from goaltracker.models.sport import Sport
from goaltracker.services.activity_metrics import extract_metric_value, utc_date_key

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
METERS_PER_KILOMETER = 1000
MAX_PERCENT = 999


class ProgressServiceError(ServiceError):
    """Exception raised when progress cannot be loaded."""

    VALIDATION_ERROR = f"PROGRESS_{ErrorCodes.VALIDATION_ERROR}"
    NOT_FOUND = f"PROGRESS_{ErrorCodes.NOT_FOUND}"
    DATABASE_ERROR = f"PROGRESS_{ErrorCodes.DATABASE_ERROR}"


def _resolve_today(today: Optional[Union[date, datetime]]) -> date:
    """UTC calendar day for the reference date (defaults to now)."""
    if today is None:
        return datetime.now(timezone.utc).date()
    if isinstance(today, datetime):
        if today.tzinfo is not None:
            today = today.astimezone(timezone.utc)
        return today.date()
    return today


def build_cumulative_series(
    activities: Iterable[Any],
    metric: MetricType,
    year: int,
    today: Optional[Union[date, datetime]] = None,
) -> list[dict[str, Any]]:
    """
    Build a gap-filled cumulative series for one metric and one year.

    Args:
        activities: Activity records exposing ``start_date`` and metric fields
        metric: Metric kind to accumulate
        year: Calendar year of the series
        today: Reference date; defaults to the current UTC date

    Returns:
        List of ``{"date": "YYYY-MM-DD", "value": running_total}`` points,
        one per day from Jan 1 through Dec 31 (past or future years) or
        through today (current year)
    """
    reference_day = _resolve_today(today)
    year_start = date(year, 1, 1)
    if year == reference_day.year:
        range_end_exclusive = reference_day + timedelta(days=1)
    else:
        range_end_exclusive = date(year + 1, 1, 1)

    daily_totals: dict[str, float] = {}
    for activity in activities:
        date_key = utc_date_key(getattr(activity, "start_date", None))
        if date_key is None:
            continue

        value = extract_metric_value(activity, metric)
        if not math.isfinite(value) or value < 0:
            continue

        daily_totals[date_key] = daily_totals.get(date_key, 0) + value

    series: list[dict[str, Any]] = []
    running_total = 0
    current_day = year_start
    while current_day < range_end_exclusive:
        key = current_day.isoformat()
        running_total += daily_totals.get(key, 0)
        series.append({"date": key, "value": running_total})
        current_day += timedelta(days=1)

    return series


def normalize_target_value(metric: MetricType, value: Optional[float]) -> float:
    """Convert a stored goal target into series units (hours -> seconds for time)."""
    if value is None or not math.isfinite(value):
        return 0
    if MetricType(metric) is MetricType.TIME:
        return value * SECONDS_PER_HOUR
    return value


def to_display_units(metric: MetricType, value: Optional[float]) -> float:
    """Convert a series value to display units: kilometers, hours or meters."""
    if value is None or not math.isfinite(value):
        return 0
    metric = MetricType(metric)
    if metric is MetricType.DISTANCE:
        return value / METERS_PER_KILOMETER
    if metric is MetricType.TIME:
        return value / SECONDS_PER_HOUR
    return value


def summarize_progress(
    series: list[dict[str, Any]],
    target_value: float,
    metric: MetricType,
) -> dict[str, float]:
    """
    Summarize a series against its target for charting.

    Args:
        series: Cumulative series from ``build_cumulative_series``
        target_value: Target already in series units (see ``normalize_target_value``)
        metric: Metric kind of the series

    Returns:
        Dict with ``achieved`` and ``target_value`` in display units and
        ``percent`` of the target reached (capped at 999, 0 without a target)
    """
    achieved = to_display_units(metric, series[-1]["value"] if series else 0)
    target = to_display_units(metric, target_value)
    percent = min(achieved / target * 100, MAX_PERCENT) if target else 0
    return {
        "achieved": achieved,
        "target_value": target,
        "percent": round(percent, 1),
    }


class ProgressService:
    """Load the records needed for progress and feed them to the series builder."""

    def get_annual_progress(
        self,
        db: Session,
        user_id: str,
        year: int,
        metric_type: MetricType,
        sport_id: Optional[str] = None,
        today: Optional[Union[date, datetime]] = None,
    ) -> dict[str, Any]:
        """
        Compute the annual cumulative progress for a user.

        Args:
            db: Database session
            user_id: Authenticated user ID
            year: Calendar year
            metric_type: Metric to accumulate
            sport_id: Optional sport filter; switches the scope to per-sport
            today: Optional reference date

        Returns:
            Dict with year, metric_type, scope_type, target_value (series
            units) and series

        Raises:
            ProgressServiceError: If the user ID is missing, the sport does
                not exist, or the database query fails
        """
        self._assert_user_id(user_id)
        metric_type = MetricType(metric_type)
        scope_type = ScopeType.PER_SPORT if sport_id else ScopeType.GLOBAL

        goal_target = self._resolve_goal_target(db, user_id, year, metric_type, sport_id)
        sport_code = self._resolve_sport_code(db, sport_id) if sport_id else None
        activities = self._fetch_activities_for_year(db, user_id, year, sport_code)
        series = build_cumulative_series(activities, metric_type, year, today)

        logger.debug(
            f"Built {len(series)}-day {metric_type.value} series for user {user_id}, year {year}"
        )

        return {
            "year": year,
            "metric_type": metric_type,
            "scope_type": scope_type,
            "target_value": normalize_target_value(metric_type, goal_target),
            "series": series,
        }

    def get_progress_history(
        self,
        db: Session,
        user_id: str,
        years: list[int],
        metric_type: MetricType,
        sport_id: Optional[str] = None,
        today: Optional[Union[date, datetime]] = None,
    ) -> list[dict[str, Any]]:
        """
        Total of one metric for each requested year.

        Returns:
            List of ``{"year": year, "value": total}`` in ascending year order
        """
        self._assert_user_id(user_id)
        metric_type = MetricType(metric_type)
        sport_code = self._resolve_sport_code(db, sport_id) if sport_id else None

        history = []
        for year in sorted(set(years)):
            activities = self._fetch_activities_for_year(db, user_id, year, sport_code)
            series = build_cumulative_series(activities, metric_type, year, today)
            history.append({"year": year, "value": series[-1]["value"] if series else 0})

        return history

    def _fetch_activities_for_year(
        self,
        db: Session,
        user_id: str,
        year: int,
        sport_code: Optional[str],
    ) -> list[Activity]:
        range_start = datetime(year, 1, 1, tzinfo=timezone.utc)
        range_end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)

        query = db.query(Activity).filter(
            Activity.user_id == user_id,
            Activity.start_date >= range_start,
            Activity.start_date < range_end,
        )
        if sport_code:
            query = query.filter(Activity.sport_type == sport_code)

        try:
            return query.order_by(Activity.start_date.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch activities for progress calculation: {e}")
            raise ProgressServiceError(
                ProgressServiceError.DATABASE_ERROR,
                "Unable to load activities for progress",
                {"originalError": str(e)},
            )

    def _resolve_sport_code(self, db: Session, sport_id: str) -> str:
        sport = db.query(Sport).filter(Sport.id == sport_id).first()
        if sport is None:
            raise ProgressServiceError(
                ProgressServiceError.VALIDATION_ERROR,
                "sport_id must reference an existing sport",
                {"sportId": sport_id},
            )
        return sport.code

    def _resolve_goal_target(
        self,
        db: Session,
        user_id: str,
        year: int,
        metric_type: MetricType,
        sport_id: Optional[str],
    ) -> float:
        scope_type = ScopeType.PER_SPORT if sport_id else ScopeType.GLOBAL
        query = db.query(Goal.target_value).filter(
            Goal.user_id == user_id,
            Goal.year == year,
            Goal.metric_type == metric_type,
            Goal.scope_type == scope_type,
        )
        if sport_id:
            query = query.filter(Goal.sport_id == sport_id)
        else:
            query = query.filter(Goal.sport_id.is_(None))

        try:
            row = query.order_by(Goal.created_at.desc()).first()
        except SQLAlchemyError as e:
            # Lookup failures degrade to "no target"
            logger.error(f"Failed to resolve goal target for progress: {e}")
            return 0

        return row.target_value if row else 0

    @staticmethod
    def _assert_user_id(user_id: str) -> None:
        if not user_id:
            raise ProgressServiceError(
                ProgressServiceError.VALIDATION_ERROR,
                "userId is required to load progress",
            )


# Create a singleton instance for convenience
progress_service = ProgressService()
