from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from app.api.deps import get_auth_client, get_db
from app.middleware.rate_limit import limiter, login_rate_limit
from app.schemas.auth import LoginRequest, LoginResponse
from core.auth_client import AuthClient, AuthProviderError
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(login_rate_limit)
def login(
    request: Request,
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    auth_client: AuthClient = Depends(get_auth_client)
):
    """
    Sign in with email and password

    Returns the provider's user and session together with the user_type of
    the matching profile in the users table (null when there is none).
    Rate limited per client IP.
    """
    try:
        result = auth_client.sign_in(credentials.email, credentials.password)
    except AuthProviderError as e:
        logger.error(f"Login failed, auth provider unavailable: {e}")
        raise HTTPException(status_code=503, detail="Authentication service unavailable")

    if not result:
        logger.info(f"Invalid credentials for {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    user_type = None
    try:
        profile = (
            db.query(User)
            .filter(func.lower(User.email) == credentials.email.lower())
            .first()
        )
        user_type = profile.user_type if profile else None
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"user_type lookup for {credentials.email} failed: {e}")

    return LoginResponse(
        user=result["user"],
        session=result["session"],
        user_type=user_type,
    )
