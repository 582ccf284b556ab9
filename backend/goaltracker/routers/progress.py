"""Progress API router."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from goaltracker.database import get_db
from goaltracker.schemas.progress import (
    ProgressAnnualRequest,
    ProgressAnnualResponse,
    ProgressHistoryRequest,
    ProgressHistoryResponse,
)
from goaltracker.services.auth_service import get_current_user_id
from goaltracker.services.progress_service import progress_service, summarize_progress

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/progress-annual", response_model=ProgressAnnualResponse)
async def get_annual_progress(
    request: ProgressAnnualRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """
    Cumulative day-by-day progress for one metric over one year.

    Series values are meters (distance, elevation gain) or seconds (time);
    ``target_value`` uses the same units. ``summary`` is in display units.
    """
    progress = progress_service.get_annual_progress(
        db,
        user_id,
        year=request.year,
        metric_type=request.metric_type,
        sport_id=request.sport_id,
    )
    progress["summary"] = summarize_progress(
        progress["series"], progress["target_value"], progress["metric_type"]
    )
    return progress


@router.post("/progress-history", response_model=ProgressHistoryResponse)
async def get_progress_history(
    request: ProgressHistoryRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """Total of one metric for each requested year."""
    items = progress_service.get_progress_history(
        db,
        user_id,
        years=request.years,
        metric_type=request.metric_type,
        sport_id=request.sport_id,
    )
    return {"metric_type": request.metric_type, "items": items}
