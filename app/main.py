from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
import structlog
import time

from app.api.v1.router import api_router
from app.errors import register_exception_handlers
from app.middleware.rate_limit import setup_rate_limiting
from core.config import get_settings
from core.database import Base, engine
from core.logging_config import configure_logging

# Import models to ensure they are registered with Base
from models.admin import AdminActivity, PlatformSetting  # noqa: F401
from models.deal import Deal  # noqa: F401
from models.event import Event  # noqa: F401
from models.partner import Partner  # noqa: F401
from models.rsvp import RSVP  # noqa: F401
from models.society import Society  # noqa: F401
from models.user import User  # noqa: F401

settings = get_settings()

# Configure structured logging
configure_logging(settings.DEBUG)

# Get structured logger
logger = structlog.get_logger()

# Create tables if they don't exist
try:
    Base.metadata.create_all(bind=engine)
    logger.info("database_tables_created", status="success")
except SQLAlchemyError as e:
    logger.warning("database_table_creation_warning", error=str(e))

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Campus events, societies and RSVPs with admin moderation"
)

# Store startup time for uptime calculation
app.state.startup_time = time.time()

register_exception_handlers(app)

# Setup rate limiting
setup_rate_limiting(app)

# CORS middleware - configurable via environment variables
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-Requested-With"],
)


@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)

    # Security headers
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    return response


@app.middleware("http")
async def request_logging_middleware(request, call_next):
    """
    Log all API requests with structured logging.

    Logs request details, response status, and execution time.
    """
    start_time = time.time()

    logger.info(
        "request_started",
        method=request.method,
        path=request.url.path,
        client_ip=request.client.host if request.client else None
    )

    try:
        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2)
        )

        return response

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error=str(e),
            duration_ms=round(duration_ms, 2),
            exc_info=True
        )
        raise


# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/api")
async def api_root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "uptime_seconds": round(time.time() - app.state.startup_time, 1)
    }
