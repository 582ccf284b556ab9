"""Goals API router."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from goaltracker.database import get_db
from goaltracker.models.goal import Goal, MetricType, ScopeType
from goaltracker.schemas.common import Paginated
from goaltracker.schemas.goal import GoalCreate, GoalListQuery, GoalResponse, GoalUpdate
from goaltracker.services.auth_service import get_current_user_id
from goaltracker.services.goals_service import goals_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Paginated[GoalResponse])
async def list_goals(
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Filter by year"),
    sport_id: Optional[str] = Query(None, description="Filter by sport ID"),
    scope_type: Optional[ScopeType] = Query(None, description="Filter by scope"),
    metric_type: Optional[MetricType] = Query(None, description="Filter by metric"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: Literal["created_at", "year", "target_value"] = Query("created_at"),
    sort_dir: Literal["asc", "desc"] = Query("desc"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """List the current user's goals."""
    params = GoalListQuery(
        year=year,
        sport_id=sport_id,
        scope_type=scope_type,
        metric_type=metric_type,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )
    return goals_service.list_goals(db, user_id, params)


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Goal:
    """
    Create a goal.

    Raises:
        GoalsServiceError: 400 for an unknown sport, 409 for a duplicate goal
    """
    return goals_service.create_goal(db, user_id, payload)


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Goal:
    """Get one goal by ID."""
    return goals_service.get_goal(db, user_id, goal_id)


@router.patch("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: str,
    updates: GoalUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Goal:
    """
    Change a goal's metric and/or target.

    The previous values are recorded in the goal's history.
    """
    return goals_service.update_goal(db, user_id, goal_id, updates)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> None:
    """Delete a goal and its history."""
    goals_service.delete_goal(db, user_id, goal_id)
