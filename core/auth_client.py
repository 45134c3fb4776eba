"""
Client for the external auth provider.

Sign-in and token verification are delegated to a GoTrue compatible REST API
(the auth service behind Supabase). This module only speaks HTTP to it; users,
passwords and sessions live entirely on the provider side.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx

from core.config import get_settings

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """Raised when the auth provider cannot be reached or answers with a server error."""


class AuthClient:
    """
    Thin HTTP wrapper around the auth provider.

    Both calls return None when the provider rejects the credentials and raise
    AuthProviderError when the provider itself is unavailable.
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = httpx.request(method, url, timeout=self.timeout, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Auth provider request failed: {method} {path}: {e}")
            raise AuthProviderError(str(e)) from e

        if response.status_code >= 500:
            logger.error(f"Auth provider error {response.status_code} for {method} {path}")
            raise AuthProviderError(f"Auth provider returned {response.status_code}")
        return response

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Auth provider sent a non-JSON reply ({response.status_code}): {e}")
            raise AuthProviderError("Auth provider returned an unreadable response") from e

    def get_user(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Resolve an access token to the provider's user record.

        Args:
            token: Bearer access token issued by the provider

        Returns:
            User dict (id, email, app_metadata, ...) or None if the token is invalid
        """
        response = self._request("GET", "/auth/v1/user", headers=self._headers(token))
        if response.status_code != 200:
            logger.info(f"Auth provider rejected token ({response.status_code})")
            return None
        return self._json(response)

    def sign_in(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Password sign-in.

        Returns:
            {"user": ..., "session": ...} on success, None on bad credentials
        """
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers=self._headers(),
        )
        if response.status_code != 200:
            logger.info(f"Auth provider rejected sign-in for {email} ({response.status_code})")
            return None

        payload = self._json(response)
        user = payload.pop("user", None)
        if not user:
            return None
        return {"user": user, "session": payload}


@lru_cache()
def get_auth_client() -> AuthClient:
    """FastAPI dependency returning the shared auth provider client."""
    settings = get_settings()
    return AuthClient(
        base_url=settings.AUTH_PROVIDER_URL,
        api_key=settings.AUTH_PROVIDER_SERVICE_KEY or settings.AUTH_PROVIDER_ANON_KEY,
        timeout=settings.AUTH_PROVIDER_TIMEOUT,
    )
