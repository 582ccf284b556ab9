"""Sport catalogue API router."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from goaltracker.database import get_db
from goaltracker.models.sport import Sport
from goaltracker.schemas.sport import SportCreate, SportResponse
from goaltracker.services.auth_service import get_current_user_id
from goaltracker.services.sports_service import sports_service

router = APIRouter()


@router.get("", response_model=List[SportResponse])
async def list_sports(db: Session = Depends(get_db)) -> List[Sport]:
    """List all sports ordered by name."""
    return sports_service.list_sports(db)


@router.post("", response_model=SportResponse, status_code=status.HTTP_201_CREATED)
async def create_sport(
    command: SportCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Sport:
    """
    Add a sport to the shared catalogue.

    Raises:
        SportsServiceError: 409 if the code already exists
    """
    return sports_service.create_sport(db, command)
