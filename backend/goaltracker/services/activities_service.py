"""Activity listing and synthetic activity generation.

The generator fills a user's history with plausible activities spread over
the last 365 days: sports are drawn from four weighted slots, start times
land in typical training hours for the local weekday, and distance and
elevation follow a seasonal multiplier.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.config import settings
from goaltracker.database import paginate
from goaltracker.exceptions import ErrorCodes, ServiceError
from goaltracker.models.activity import Activity
from goaltracker.schemas.activity import (
    ActivityDistribution,
    ActivityListQuery,
    GenerateActivitiesRequest,
)
from goaltracker.schemas.sport import SportProfile
from goaltracker.services.sports_service import sports_service

logger = logging.getLogger(__name__)

ACTIVITY_SORT_COLUMNS = {
    "start_date": Activity.start_date,
    "distance": Activity.distance,
    "moving_time": Activity.moving_time,
}

TOTAL_SYNTHETIC_ACTIVITIES = 100
SPORT_SLOTS = 4
DEFAULT_SPORTS = ["running", "cycling", "swimming", "hiking"]
DEFAULT_DISTRIBUTION = ActivityDistribution(
    primary=0.5, secondary=0.3, tertiary=0.15, quaternary=0.05
)
WEEKDAY_ACTIVE_HOURS = (16, 21)
WEEKEND_ACTIVE_HOURS = (7, 19)

SPORT_PROFILES = {
    "running": SportProfile(
        type="Run", display_name="Run",
        distance_km_range=(3, 24), speed_kph_range=(8.5, 15.5), elevation_range=(20, 450),
    ),
    "cycling": SportProfile(
        type="Ride", display_name="Ride",
        distance_km_range=(15, 120), speed_kph_range=(22, 36), elevation_range=(50, 1200),
    ),
    "swimming": SportProfile(
        type="Swim", display_name="Swim",
        distance_km_range=(0.6, 4), speed_kph_range=(2, 5), elevation_range=(0, 25),
    ),
    "hiking": SportProfile(
        type="Hike", display_name="Hike",
        distance_km_range=(4, 25), speed_kph_range=(3, 6), elevation_range=(120, 1500),
    ),
    "walking": SportProfile(
        type="Walk", display_name="Walk",
        distance_km_range=(2, 12), speed_kph_range=(3, 6), elevation_range=(0, 200),
    ),
    "sup": SportProfile(
        type="StandUpPaddle", display_name="SUP",
        distance_km_range=(2, 10), speed_kph_range=(4, 8), elevation_range=(0, 50),
    ),
    "pilates": SportProfile(
        type="Workout", display_name="Pilates",
        distance_km_range=(1, 3), speed_kph_range=(3, 5), elevation_range=(0, 20),
    ),
    "strength_training": SportProfile(
        type="Workout", display_name="Strength",
        distance_km_range=(1, 4), speed_kph_range=(1, 4), elevation_range=(0, 40),
    ),
}

# Distance/elevation multiplier by month
SEASONALITY = {
    12: 0.7, 1: 0.7, 2: 0.7,
    3: 0.9, 4: 0.9, 5: 0.9,
    6: 1.1, 7: 1.1, 8: 1.1,
}


class ActivitiesServiceError(ServiceError):
    """Exception raised for activity operations."""

    VALIDATION_ERROR = f"ACTIVITIES_{ErrorCodes.VALIDATION_ERROR}"
    DATABASE_ERROR = f"ACTIVITIES_{ErrorCodes.DATABASE_ERROR}"


@dataclass
class GeneratorConfig:
    """Resolved generator settings."""

    timezone: str
    sports: list[str]
    distribution: ActivityDistribution
    total: int = TOTAL_SYNTHETIC_ACTIVITIES


def _to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


def resolve_generator_config(overrides: Optional[GenerateActivitiesRequest] = None) -> GeneratorConfig:
    """
    Merge request overrides with the defaults.

    Sport codes are lower-cased and de-duplicated, then padded with (or cut
    to) exactly four slots. The distribution is rescaled to sum to one.
    """
    overrides = overrides or GenerateActivitiesRequest()

    requested = overrides.primary_sports or DEFAULT_SPORTS
    sports: list[str] = []
    for sport in requested:
        code = sport.strip().lower()
        if code and code not in sports:
            sports.append(code)
    for fallback in DEFAULT_SPORTS:
        if len(sports) >= SPORT_SLOTS:
            break
        if fallback not in sports:
            sports.append(fallback)
    sports = sports[:SPORT_SLOTS]

    timezone_name = (overrides.timezone or settings.DEFAULT_TIMEZONE).strip() or settings.DEFAULT_TIMEZONE

    return GeneratorConfig(
        timezone=timezone_name,
        sports=sports,
        distribution=normalize_distribution(overrides.distribution or DEFAULT_DISTRIBUTION),
    )


def normalize_distribution(dist: ActivityDistribution) -> ActivityDistribution:
    """Rescale slot weights to sum to one; all-zero weights fall back to the default."""
    total = dist.primary + dist.secondary + dist.tertiary + dist.quaternary
    if not total:
        return DEFAULT_DISTRIBUTION
    return ActivityDistribution.model_construct(
        primary=dist.primary / total,
        secondary=dist.secondary / total,
        tertiary=dist.tertiary / total,
        quaternary=dist.quaternary / total,
    )


def fallback_profile(code: str) -> SportProfile:
    """Generic profile titled after the sport code, e.g. "trail_running" -> "Trail Running"."""
    title = " ".join(
        segment.capitalize() for segment in code.replace("-", " ").replace("_", " ").split()
    )
    return SportProfile(display_name=title or "Workout")


def pick_sport(config: GeneratorConfig, rng: random.Random) -> str:
    """Draw one sport code according to the slot weights."""
    dist = config.distribution
    weights = [dist.primary, dist.secondary, dist.tertiary, dist.quaternary]
    threshold = rng.random() * (sum(weights) or 1)

    accumulator = 0.0
    for sport, weight in zip(config.sports, weights):
        accumulator += weight
        if threshold <= accumulator:
            return sport
    return config.sports[-1]


def localize_start(moment: datetime, zone: ZoneInfo, rng: random.Random) -> datetime:
    """
    Move a random moment to a plausible training hour of its local day.

    Weekdays use 16:00-21:59, weekends 07:00-19:59. Returns an aware
    datetime in ``zone``.
    """
    local = moment.astimezone(zone)
    low, high = WEEKEND_ACTIVE_HOURS if local.weekday() >= 5 else WEEKDAY_ACTIVE_HOURS
    return datetime(
        local.year, local.month, local.day,
        rng.randint(low, high), rng.randint(0, 59), rng.randint(0, 59),
        tzinfo=zone,
    )


def build_activity_name(display_name: str, hour: int) -> str:
    if hour < 9:
        time_of_day = "Morning"
    elif hour < 13:
        time_of_day = "Lunch"
    elif hour < 18:
        time_of_day = "Afternoon"
    else:
        time_of_day = "Evening"
    return f"{time_of_day} {display_name}".strip()


def build_metrics(profile: SportProfile, seasonality: float, rng: random.Random) -> dict[str, Any]:
    """Random distance, moving/elapsed time, elevation and speed for one activity."""
    dist_low, dist_high = profile.distance_km_range
    distance_km = min(
        max(rng.uniform(dist_low, dist_high) * seasonality, dist_low * 0.5),
        dist_high * 1.25,
    )
    distance_m = max(100, round(distance_km * 1000))

    speed_kph = rng.uniform(*profile.speed_kph_range)
    moving_seconds = max(300, round(distance_km / speed_kph * 3600))
    elapsed_seconds = moving_seconds + rng.randint(60, 900)

    elev_low, elev_high = profile.elevation_range
    elevation = max(0, round(min(max(rng.uniform(elev_low, elev_high) * seasonality, 0), elev_high * 1.25)))

    return {
        "distance": distance_m,
        "moving_time": f"{moving_seconds} seconds",
        "elapsed_time": f"{elapsed_seconds} seconds",
        "total_elevation_gain": elevation,
        "average_speed": round(distance_m / moving_seconds, 2),
    }


def build_synthetic_activities(
    user_id: str,
    config: GeneratorConfig,
    profiles: Optional[dict[str, SportProfile]] = None,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> list[Activity]:
    """
    Build (but do not persist) synthetic activities for a user.

    Args:
        user_id: Owner of the activities
        config: Resolved generator settings
        profiles: Per-code profile overrides, e.g. from the sport catalogue
        now: End of the generation window (defaults to the current time)
        rng: Random source, injectable for reproducible output

    Returns:
        ``config.total`` unsaved Activity rows
    """
    profiles = profiles or {}
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()
    zone = ZoneInfo(config.timezone)
    window_start = now - timedelta(days=365)

    activities = []
    for _ in range(config.total):
        moment = window_start + (now - window_start) * rng.random()
        local_start = localize_start(moment, zone, rng)
        sport_code = pick_sport(config, rng)
        profile = profiles.get(sport_code) or SPORT_PROFILES.get(sport_code) or fallback_profile(sport_code)
        metrics = build_metrics(profile, SEASONALITY.get(local_start.month, 1.0), rng)

        activities.append(
            Activity(
                user_id=user_id,
                name=build_activity_name(profile.display_name or profile.type, local_start.hour),
                type=profile.type,
                sport_type=sport_code,
                start_date=_to_utc(local_start),
                start_date_local=local_start.isoformat(),
                timezone=config.timezone,
                utc_offset=int(local_start.utcoffset().total_seconds()),
                **metrics,
            )
        )

    return activities


class ActivitiesService:
    """Read and generate a user's activities."""

    def list_activities(self, db: Session, user_id: str, params: ActivityListQuery) -> dict[str, Any]:
        """
        List a user's activities with filters, sorting and pagination.

        Returns:
            Page envelope with ``data``, ``page``, ``limit`` and ``total``
        """
        if not user_id:
            raise ActivitiesServiceError(
                ActivitiesServiceError.VALIDATION_ERROR,
                "userId is required to fetch activities",
            )

        query = db.query(Activity).filter(Activity.user_id == user_id)
        if params.from_:
            query = query.filter(Activity.start_date >= _to_utc(params.from_))
        if params.to:
            query = query.filter(Activity.start_date <= _to_utc(params.to))
        if params.sport_type:
            query = query.filter(Activity.sport_type == params.sport_type)
        if params.type:
            query = query.filter(Activity.type == params.type)

        column = ACTIVITY_SORT_COLUMNS[params.sort_by]
        query = query.order_by(column.asc() if params.sort_dir == "asc" else column.desc())

        try:
            return paginate(query, params.page, params.limit)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list activities: {e}")
            raise ActivitiesServiceError(
                ActivitiesServiceError.DATABASE_ERROR,
                "Unable to fetch activities for the current user",
                {"originalError": str(e)},
            )

    def generate_activities(
        self,
        db: Session,
        user_id: str,
        overrides: Optional[GenerateActivitiesRequest] = None,
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ) -> dict[str, int]:
        """
        Insert synthetic activities for the user.

        Profiles stored on sport catalogue entries take precedence over the
        built-in ones.

        Returns:
            Dict with ``created_count``
        """
        if not user_id:
            raise ActivitiesServiceError(
                ActivitiesServiceError.VALIDATION_ERROR,
                "userId is required to generate activities",
            )

        config = resolve_generator_config(overrides)
        profiles = {}
        for code in config.sports:
            profile = sports_service.get_profile(db, code)
            if profile is not None:
                profiles[code] = profile

        activities = build_synthetic_activities(user_id, config, profiles, now, rng)

        try:
            db.add_all(activities)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to generate activities: {e}")
            raise ActivitiesServiceError(
                ActivitiesServiceError.DATABASE_ERROR,
                "Unable to generate activities for the current user",
                {"originalError": str(e)},
            )

        logger.info(
            f"Generated {len(activities)} activities for user {user_id} "
            f"(sports={config.sports}, timezone={config.timezone})"
        )
        return {"created_count": len(activities)}


# Create a singleton instance for convenience
activities_service = ActivitiesService()
