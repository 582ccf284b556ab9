"""Sport catalogue service."""

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.exceptions import ErrorCodes, ServiceError
from goaltracker.models.sport import Sport
from goaltracker.schemas.sport import SportCreate, SportProfile

logger = logging.getLogger(__name__)


class SportsServiceError(ServiceError):
    """Exception raised for sport catalogue operations."""

    CONFLICT = f"SPORTS_{ErrorCodes.CONFLICT}"
    DATABASE_ERROR = f"SPORTS_{ErrorCodes.DATABASE_ERROR}"


class SportsService:
    """List and extend the shared sport catalogue."""

    def list_sports(self, db: Session) -> list[Sport]:
        """All sports ordered by display name."""
        try:
            return db.query(Sport).order_by(Sport.name.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch sports: {e}")
            raise SportsServiceError(
                SportsServiceError.DATABASE_ERROR,
                "Failed to fetch sports",
                {"originalError": str(e)},
            )

    def create_sport(self, db: Session, command: SportCreate) -> Sport:
        """
        Add a sport to the catalogue.

        Raises:
            SportsServiceError: CONFLICT if the code is already taken
        """
        if db.query(Sport).filter(Sport.code == command.code).first() is not None:
            raise SportsServiceError(
                SportsServiceError.CONFLICT,
                f'Sport with code "{command.code}" already exists',
                {"code": command.code},
            )

        sport = Sport(code=command.code, name=command.name, description=command.description)
        try:
            db.add(sport)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise SportsServiceError(
                SportsServiceError.CONFLICT,
                f'Sport with code "{command.code}" already exists',
                {"code": command.code},
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create sport: {e}")
            raise SportsServiceError(
                SportsServiceError.DATABASE_ERROR,
                "Failed to create sport due to database error",
                {"originalError": str(e)},
            )

        db.refresh(sport)
        logger.info(f"Created sport '{sport.code}'")
        return sport

    def get_profile(self, db: Session, code: str) -> Optional[SportProfile]:
        """Generator profile stored on the catalogue entry for ``code``, if any."""
        sport = db.query(Sport).filter(Sport.code == code).first()
        if sport is None or not sport.profile:
            return None
        try:
            return SportProfile.model_validate(sport.profile)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed metadata for sport '{code}': {e}")
            return None


# Create a singleton instance for convenience
sports_service = SportsService()
