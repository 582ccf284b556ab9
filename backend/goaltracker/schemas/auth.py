"""Pydantic schemas for account operations."""

from pydantic import BaseModel, EmailStr, Field


class PasswordRecoveryRequest(BaseModel):
    """Request a password reset e-mail."""

    email: EmailStr = Field(..., description="Account e-mail address")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class AccountDeletedResponse(BaseModel):
    """Response for a successful account deletion."""

    success: bool = True
    message: str = "Account deleted successfully"
