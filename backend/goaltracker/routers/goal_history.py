"""Goal history API router."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from goaltracker.database import get_db
from goaltracker.schemas.common import Paginated
from goaltracker.schemas.goal import GoalHistoryQuery, GoalHistoryResponse
from goaltracker.services.auth_service import get_current_user_id
from goaltracker.services.goals_service import goals_service

router = APIRouter()


@router.get("", response_model=Paginated[GoalHistoryResponse])
async def list_goal_history(
    goal_id: str = Query(..., description="Goal whose history to list"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_dir: Literal["asc", "desc"] = Query("desc"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """List the previous values of one of the current user's goals."""
    params = GoalHistoryQuery(goal_id=goal_id, page=page, limit=limit, sort_dir=sort_dir)
    return goals_service.list_goal_history(db, user_id, params)
