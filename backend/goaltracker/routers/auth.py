"""Account API router."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from goaltracker.config import settings
from goaltracker.database import get_db
from goaltracker.exceptions import ErrorCodes, ServiceError
from goaltracker.models.activity import Activity
from goaltracker.models.goal import Goal
from goaltracker.schemas.auth import AccountDeletedResponse, MessageResponse, PasswordRecoveryRequest
from goaltracker.services.auth_service import get_current_user_id
from goaltracker.services.supabase_admin import supabase_admin

logger = logging.getLogger(__name__)

router = APIRouter()

RECOVERY_MESSAGE = (
    "If an account exists for this address, password reset instructions have been sent. "
    "Check your inbox."
)


@router.post("/recover", response_model=MessageResponse)
async def recover_password(request: PasswordRecoveryRequest) -> dict:
    """
    Request a password reset e-mail.

    The response does not reveal whether the address has an account.
    """
    redirect_to = f"{settings.FRONTEND_URL.rstrip('/')}{settings.PASSWORD_RESET_REDIRECT_PATH}"
    await supabase_admin.send_password_recovery(request.email, redirect_to)
    return {"message": RECOVERY_MESSAGE}


@router.delete("/account", response_model=AccountDeletedResponse)
async def delete_account(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """
    Delete the current user's account.

    The auth user is removed first; the user's goals (with their history)
    and activities are deleted afterwards.
    """
    await supabase_admin.delete_user(user_id)

    try:
        goals = db.query(Goal).filter(Goal.user_id == user_id).all()
        for goal in goals:
            db.delete(goal)
        deleted_activities = (
            db.query(Activity)
            .filter(Activity.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete data for user {user_id}: {e}")
        raise ServiceError(
            f"ACCOUNT_{ErrorCodes.DATABASE_ERROR}",
            "Account was deleted but its data could not be removed",
            {"originalError": str(e)},
        )

    logger.info(
        f"Deleted account {user_id}: {len(goals)} goals, {deleted_activities} activities"
    )
    return {"success": True, "message": "Account deleted successfully"}
