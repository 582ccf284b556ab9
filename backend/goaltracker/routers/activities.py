"""Activities API router."""

import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from goaltracker.database import get_db
from goaltracker.schemas.activity import (
    ActivityListQuery,
    ActivityResponse,
    GenerateActivitiesRequest,
    GenerateActivitiesResponse,
)
from goaltracker.schemas.common import Paginated
from goaltracker.services.activities_service import activities_service
from goaltracker.services.auth_service import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Paginated[ActivityResponse])
async def list_activities(
    from_: Optional[datetime] = Query(None, alias="from", description="Only activities starting at or after this time"),
    to: Optional[datetime] = Query(None, description="Only activities starting at or before this time"),
    sport_type: Optional[str] = Query(None, description="Filter by sport code"),
    type: Optional[str] = Query(None, description="Filter by raw activity type"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: Literal["start_date", "distance", "moving_time"] = Query("start_date"),
    sort_dir: Literal["asc", "desc"] = Query("desc"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """
    List the current user's activities.

    Returns:
        One page of activities with the total count
    """
    params = ActivityListQuery(
        from_=from_,
        to=to,
        sport_type=sport_type,
        type=type,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )
    return activities_service.list_activities(db, user_id, params)


@router.post(
    "/generate",
    response_model=GenerateActivitiesResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_activities(
    request: Optional[GenerateActivitiesRequest] = Body(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """
    Fill the current user's history with synthetic activities.

    All body fields are optional; an empty body uses the defaults.
    """
    return activities_service.generate_activities(db, user_id, request)
