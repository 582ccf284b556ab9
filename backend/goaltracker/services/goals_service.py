"""Goal management service.

Goals are owned by a single user; every query is filtered by the
authenticated user ID. Changing a goal's metric or target writes the
previous values to the goal history journal in the same transaction.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.database import paginate
from goaltracker.exceptions import ErrorCodes, ServiceError
from goaltracker.models.goal import Goal, GoalHistory, ScopeType
from goaltracker.models.sport import Sport
from goaltracker.schemas.goal import GoalCreate, GoalHistoryQuery, GoalListQuery, GoalUpdate

logger = logging.getLogger(__name__)

GOAL_SORT_COLUMNS = {
    "created_at": Goal.created_at,
    "year": Goal.year,
    "target_value": Goal.target_value,
}


class GoalsServiceError(ServiceError):
    """Exception raised for goal operations."""

    VALIDATION_ERROR = f"GOALS_{ErrorCodes.VALIDATION_ERROR}"
    NOT_FOUND = f"GOALS_{ErrorCodes.NOT_FOUND}"
    CONFLICT = f"GOALS_{ErrorCodes.CONFLICT}"
    DATABASE_ERROR = f"GOALS_{ErrorCodes.DATABASE_ERROR}"


class GoalsService:
    """CRUD operations on goals plus the goal history journal."""

    def list_goals(self, db: Session, user_id: str, params: GoalListQuery) -> dict[str, Any]:
        """
        List a user's goals with optional filters.

        Args:
            db: Database session
            user_id: Authenticated user ID
            params: Filters, sort order and page

        Returns:
            Page envelope with ``data``, ``page``, ``limit`` and ``total``
        """
        self._assert_user_id(user_id)

        query = db.query(Goal).filter(Goal.user_id == user_id)
        if params.year:
            query = query.filter(Goal.year == params.year)
        if params.scope_type:
            query = query.filter(Goal.scope_type == params.scope_type)
        if params.metric_type:
            query = query.filter(Goal.metric_type == params.metric_type)
        if params.sport_id:
            query = query.filter(Goal.sport_id == params.sport_id)

        column = GOAL_SORT_COLUMNS[params.sort_by]
        query = query.order_by(column.asc() if params.sort_dir == "asc" else column.desc())

        try:
            return paginate(query, params.page, params.limit)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list goals: {e}")
            raise GoalsServiceError(
                GoalsServiceError.DATABASE_ERROR,
                "Unable to load goals for the current user",
                {"originalError": str(e)},
            )

    def get_goal(self, db: Session, user_id: str, goal_id: str) -> Goal:
        """
        Fetch one of the user's goals.

        Raises:
            GoalsServiceError: NOT_FOUND if the goal does not exist or
                belongs to another user
        """
        self._assert_user_id(user_id)
        if not goal_id:
            raise GoalsServiceError(
                GoalsServiceError.VALIDATION_ERROR,
                "goalId is required to fetch a goal",
            )

        try:
            goal = (
                db.query(Goal)
                .filter(Goal.user_id == user_id, Goal.id == goal_id)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch goal {goal_id}: {e}")
            raise GoalsServiceError(
                GoalsServiceError.DATABASE_ERROR,
                "Unable to fetch goal details",
                {"originalError": str(e)},
            )

        if goal is None:
            raise GoalsServiceError(GoalsServiceError.NOT_FOUND, "Goal not found", {"goalId": goal_id})

        return goal

    def create_goal(self, db: Session, user_id: str, payload: GoalCreate) -> Goal:
        """
        Create a goal for the user.

        Raises:
            GoalsServiceError: VALIDATION_ERROR for an unknown sport, CONFLICT
                when an equivalent goal exists, DATABASE_ERROR otherwise
        """
        self._assert_user_id(user_id)

        if payload.sport_id and db.get(Sport, payload.sport_id) is None:
            raise GoalsServiceError(
                GoalsServiceError.VALIDATION_ERROR,
                "sport_id must reference an existing sport",
                {"sportId": payload.sport_id},
            )

        if self._find_duplicate(db, user_id, payload) is not None:
            raise GoalsServiceError(
                GoalsServiceError.CONFLICT,
                "A similar goal already exists for the selected year and metric",
            )

        goal = Goal(
            user_id=user_id,
            year=payload.year,
            scope_type=payload.scope_type,
            sport_id=payload.sport_id,
            metric_type=payload.metric_type,
            target_value=payload.target_value,
        )

        try:
            db.add(goal)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise GoalsServiceError(
                GoalsServiceError.CONFLICT,
                "A similar goal already exists for the selected year and metric",
                {"originalError": str(e.orig)},
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create goal: {e}")
            raise GoalsServiceError(
                GoalsServiceError.DATABASE_ERROR,
                "Unable to create goal right now",
                {"originalError": str(e)},
            )

        db.refresh(goal)
        logger.info(f"Created goal {goal.id} for user {user_id}")
        return goal

    def update_goal(self, db: Session, user_id: str, goal_id: str, updates: GoalUpdate) -> Goal:
        """
        Change a goal's metric and/or target.

        The values in effect before the change are journaled to goal history
        when anything actually changes.
        """
        goal = self.get_goal(db, user_id, goal_id)
        changes = updates.model_dump(exclude_none=True)
        if not changes:
            raise GoalsServiceError(
                GoalsServiceError.VALIDATION_ERROR,
                "At least one field must be provided to update a goal",
            )

        changed = any(getattr(goal, field) != value for field, value in changes.items())
        if not changed:
            return goal

        db.add(
            GoalHistory(
                goal_id=goal.id,
                previous_metric_type=goal.metric_type,
                previous_target_value=goal.target_value,
            )
        )
        for field, value in changes.items():
            setattr(goal, field, value)

        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise GoalsServiceError(
                GoalsServiceError.CONFLICT,
                "A similar goal already exists for the selected year and metric",
                {"originalError": str(e.orig)},
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update goal {goal_id}: {e}")
            raise GoalsServiceError(
                GoalsServiceError.DATABASE_ERROR,
                "Unable to update goal right now",
                {"originalError": str(e)},
            )

        db.refresh(goal)
        logger.info(f"Updated goal {goal_id} for user {user_id}: {changes}")
        return goal

    def delete_goal(self, db: Session, user_id: str, goal_id: str) -> None:
        """Delete one of the user's goals together with its history."""
        goal = self.get_goal(db, user_id, goal_id)

        try:
            db.delete(goal)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete goal {goal_id}: {e}")
            raise GoalsServiceError(
                GoalsServiceError.DATABASE_ERROR,
                "Unable to delete goal right now",
                {"originalError": str(e)},
            )

        logger.info(f"Deleted goal {goal_id} for user {user_id}")

    def list_goal_history(self, db: Session, user_id: str, params: GoalHistoryQuery) -> dict[str, Any]:
        """
        Page through the history journal of one goal.

        The goal must belong to the user; otherwise NOT_FOUND is raised.
        """
        self.get_goal(db, user_id, params.goal_id)

        query = db.query(GoalHistory).filter(GoalHistory.goal_id == params.goal_id)
        column = GoalHistory.changed_at
        query = query.order_by(column.asc() if params.sort_dir == "asc" else column.desc())

        try:
            return paginate(query, params.page, params.limit)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list goal history: {e}")
            raise GoalsServiceError(
                GoalsServiceError.DATABASE_ERROR,
                "Unable to load goal history",
                {"originalError": str(e)},
            )

    @staticmethod
    def _find_duplicate(db: Session, user_id: str, payload: GoalCreate) -> Optional[Goal]:
        query = db.query(Goal).filter(
            Goal.user_id == user_id,
            Goal.year == payload.year,
            Goal.scope_type == payload.scope_type,
            Goal.metric_type == payload.metric_type,
        )
        if payload.scope_type is ScopeType.PER_SPORT:
            query = query.filter(Goal.sport_id == payload.sport_id)
        else:
            query = query.filter(Goal.sport_id.is_(None))
        return query.first()

    @staticmethod
    def _assert_user_id(user_id: str) -> None:
        if not user_id:
            raise GoalsServiceError(
                GoalsServiceError.VALIDATION_ERROR,
                "userId is required for goal operations",
            )


# Create a singleton instance for convenience
goals_service = GoalsService()
