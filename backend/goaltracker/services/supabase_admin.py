"""
Hosted auth server client.

Covers the two account operations the API forwards: requesting a
password recovery e-mail and deleting a user. Requests are retried on
timeouts, transport errors and rate limiting.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from goaltracker.config import settings
from goaltracker.exceptions import ErrorCodes, ServiceError

logger = logging.getLogger(__name__)


class SupabaseAdminError(ServiceError):
    """Exception raised when the auth server rejects or fails a request."""

    CLIENT_UNAVAILABLE = f"ACCOUNT_{ErrorCodes.CLIENT_UNAVAILABLE}"
    UPSTREAM_ERROR = f"ACCOUNT_{ErrorCodes.UPSTREAM_ERROR}"

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(code, message, details)


class SupabaseAdminClient:
    """
    Minimal client for the hosted auth REST API.

    Attributes:
        auth_url: Base URL of the auth API (``<project>/auth/v1``)
        anon_key: Public API key, sent with unauthenticated requests
        service_role_key: Privileged key required for admin endpoints
    """

    MAX_RETRIES = 3
    RETRY_DELAY = 1.0  # seconds

    def __init__(
        self,
        auth_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        service_role_key: Optional[str] = None,
    ):
        self.auth_url = auth_url or settings.SUPABASE_AUTH_URL
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.service_role_key = (
            service_role_key if service_role_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        )

    def _headers(self, key: str) -> dict[str, str]:
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    async def _make_request(
        self,
        method: str,
        path: str,
        headers: dict,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        timeout: float = 15.0,
    ) -> Optional[dict]:
        """
        Send a request to the auth API with retries.

        Returns:
            Parsed JSON body, or None for an empty response

        Raises:
            SupabaseAdminError: On an error status or after exhausting retries
        """
        url = f"{self.auth_url}{path}"
        async with httpx.AsyncClient(timeout=timeout) as client:
            for attempt in range(self.MAX_RETRIES):
                try:
                    response = await client.request(
                        method=method,
                        url=url,
                        headers=headers,
                        params=params,
                        json=json,
                    )
                except httpx.TimeoutException:
                    logger.warning(f"Auth API timeout. Attempt {attempt + 1}/{self.MAX_RETRIES}")
                    if attempt < self.MAX_RETRIES - 1:
                        await asyncio.sleep(self.RETRY_DELAY)
                        continue
                    raise SupabaseAdminError(
                        SupabaseAdminError.UPSTREAM_ERROR, "Auth server request timed out", status_code=408
                    )
                except httpx.RequestError as e:
                    logger.error(f"Auth API request error: {e}")
                    if attempt < self.MAX_RETRIES - 1:
                        await asyncio.sleep(self.RETRY_DELAY)
                        continue
                    raise SupabaseAdminError(
                        SupabaseAdminError.UPSTREAM_ERROR, f"Auth server request failed: {e}"
                    )

                if response.status_code == 429 and attempt < self.MAX_RETRIES - 1:
                    wait_time = min(self.RETRY_DELAY * (2 ** attempt), 30)
                    logger.warning(
                        f"Auth API rate limit hit. Attempt {attempt + 1}/{self.MAX_RETRIES}. "
                        f"Retrying in {wait_time}s"
                    )
                    await asyncio.sleep(wait_time)
                    continue

                if response.status_code >= 400:
                    try:
                        error_body = response.json()
                    except ValueError:
                        error_body = {"raw": response.text}

                    error_message = (
                        error_body.get("msg")
                        or error_body.get("message")
                        or error_body.get("error_description")
                        or f"HTTP {response.status_code}"
                    )
                    logger.error(f"Auth API error: {response.status_code} - {error_message}")
                    raise SupabaseAdminError(
                        SupabaseAdminError.UPSTREAM_ERROR,
                        error_message,
                        {"status": response.status_code},
                        status_code=response.status_code,
                    )

                if not response.content:
                    return None
                return response.json()

    async def send_password_recovery(self, email: str, redirect_to: str) -> None:
        """Ask the auth server to e-mail a password reset link."""
        if not self.anon_key:
            raise SupabaseAdminError(
                SupabaseAdminError.CLIENT_UNAVAILABLE, "Auth client is not configured"
            )

        await self._make_request(
            "POST",
            "/recover",
            headers=self._headers(self.anon_key),
            params={"redirect_to": redirect_to},
            json={"email": email},
        )
        logger.info("Password recovery e-mail requested")

    async def delete_user(self, user_id: str) -> None:
        """Delete a user account. Requires the service role key."""
        if not self.service_role_key:
            raise SupabaseAdminError(
                SupabaseAdminError.CLIENT_UNAVAILABLE, "Auth admin client is not configured"
            )

        await self._make_request(
            "DELETE",
            f"/admin/users/{user_id}",
            headers=self._headers(self.service_role_key),
        )
        logger.info(f"Deleted auth user {user_id}")


# Create a singleton instance for convenience
supabase_admin = SupabaseAdminClient()
