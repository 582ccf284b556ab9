"""Dashboard API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from goaltracker.database import get_db
from goaltracker.schemas.dashboard import DashboardMetrics
from goaltracker.services.auth_service import get_current_user_id
from goaltracker.services.dashboard_service import dashboard_service

router = APIRouter()


@router.get("/metrics", response_model=DashboardMetrics)
async def get_dashboard_metrics(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """Goal counts and per-sport activity breakdowns for the current month and year."""
    return dashboard_service.get_dashboard_metrics(db, user_id)
