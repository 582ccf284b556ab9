"""
Access token authentication.

Tokens are issued by the hosted auth server; this service only reads them
from the request and verifies their signature and claims. The ``sub``
claim is the user ID every query is scoped to.
"""

import logging
from typing import Optional
from urllib.parse import unquote

from fastapi import Request
from jose import JWTError, jwt

from goaltracker.config import settings
from goaltracker.exceptions import ErrorCodes, ServiceError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "
ACCESS_TOKEN_HEADER = "x-supabase-access-token"


class AuthServiceError(ServiceError):
    """Exception raised when a request cannot be authenticated."""

    UNAUTHORIZED = f"AUTH_{ErrorCodes.UNAUTHORIZED}"


def _is_auth_cookie(name: str) -> bool:
    if name in ("sb-access-token", "sb-auth-token"):
        return True
    return name.startswith("sb-") and (name.endswith("-access-token") or name.endswith("-auth-token"))


def extract_token_from_cookies(cookie_header: Optional[str]) -> Optional[str]:
    """
    Find an access token in a raw ``Cookie`` header.

    Accepts ``sb-access-token``, ``sb-auth-token`` and the project-scoped
    ``sb-<ref>-access-token`` / ``sb-<ref>-auth-token`` names.
    """
    if not cookie_header:
        return None

    for cookie in cookie_header.split(";"):
        name, _, raw_value = cookie.strip().partition("=")
        if raw_value and _is_auth_cookie(name):
            return unquote(raw_value)

    return None


def extract_token(request: Request) -> Optional[str]:
    """
    Read the access token from a request.

    Checked in order: ``Authorization: Bearer``, the
    ``x-supabase-access-token`` header, then auth cookies.
    """
    auth_header = request.headers.get("authorization")
    if auth_header:
        value = auth_header.strip()
        if value.lower().startswith(BEARER_PREFIX):
            return value[len(BEARER_PREFIX):].strip()

    fallback = request.headers.get(ACCESS_TOKEN_HEADER)
    if fallback:
        return fallback.strip()

    return extract_token_from_cookies(request.headers.get("cookie"))


def verify_token(token: str) -> str:
    """
    Verify an access token and return its user ID.

    Args:
        token: Encoded JWT

    Returns:
        The ``sub`` claim

    Raises:
        AuthServiceError: If the signature, expiry, audience or subject is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise AuthServiceError(
            AuthServiceError.UNAUTHORIZED,
            "Invalid or expired access token",
            {"reason": "invalid_token", "originalError": str(e)},
        )

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token missing 'sub' claim")
        raise AuthServiceError(
            AuthServiceError.UNAUTHORIZED,
            "Invalid token: missing subject",
            {"reason": "invalid_token"},
        )

    return str(user_id)


async def get_current_user_id(request: Request) -> str:
    """
    FastAPI dependency resolving the authenticated user's ID.

    Raises:
        AuthServiceError: 401 when the token is missing or invalid
    """
    token = extract_token(request)
    if not token:
        logger.debug("No access token provided")
        raise AuthServiceError(
            AuthServiceError.UNAUTHORIZED,
            "Access token is required for this operation",
            {"reason": "missing_token"},
        )

    return verify_token(token)
