"""
Bearer token authentication for protected endpoints.

Tokens are issued and verified by the external auth provider; this module only
extracts the token, asks the provider who it belongs to and decides whether
that user may use admin endpoints.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status

from core.auth_client import AuthClient, AuthProviderError, get_auth_client
from core.config import get_settings

logger = logging.getLogger(__name__)


def extract_bearer_token(request: Request) -> Optional[str]:
    """
    Get the bearer token from the Authorization header.

    Returns:
        Token string, or None when the header is absent or not a Bearer header
    """
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def is_admin(user: Dict[str, Any]) -> bool:
    """
    Decide whether a provider user is an admin.

    A user is an admin when their email is on the ADMIN_EMAILS allow-list or
    when the provider marks them with app_metadata.role == "admin".
    """
    email = (user.get("email") or "").strip().lower()
    if email and email in get_settings().get_admin_emails():
        return True
    app_metadata = user.get("app_metadata") or {}
    return app_metadata.get("role") == "admin"


def require_user(
    request: Request,
    auth_client: AuthClient = Depends(get_auth_client),
) -> Dict[str, Any]:
    """
    Dependency that requires a valid provider token.

    Raises:
        HTTPException 403: If no bearer token is provided
        HTTPException 401: If the provider rejects the token
        HTTPException 503: If the provider cannot be reached

    Example:
        @router.post("/deals")
        async def submit_deal(user: dict = Depends(require_user)):
            ...
    """
    token = extract_bearer_token(request)
    if not token:
        logger.warning(f"Bearer token missing for {request.method} {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Authentication token not provided."
        )

    try:
        user = auth_client.get_user(token)
    except AuthProviderError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable"
        )

    if not user:
        logger.warning(f"Invalid token for {request.method} {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    request.state.user = user
    return user


def require_admin(
    request: Request,
    user: Dict[str, Any] = Depends(require_user),
) -> Dict[str, Any]:
    """
    Dependency that requires an admin user.

    Raises:
        HTTPException 403: If the authenticated user is not an admin
    """
    if not is_admin(user):
        logger.warning(f"Non-admin {user.get('email')} denied {request.method} {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    logger.info(f"Admin {user.get('email')} authenticated for {request.method} {request.url.path}")
    return user
