"""
Exception handlers that give every error response the same shape:

    {"message": "<human readable text>"}
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "A record with these details already exists."


def format_validation_error(exc: RequestValidationError) -> str:
    """
    Render the first validation error as a single field-specific message.

    Schema validators raise ValueError with the final message already written,
    so those are passed through; pydantic's own errors get the field name
    prepended.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request."

    error = errors[0]
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else None
    message = str(error.get("msg", "Invalid value"))

    if error.get("type") == "missing":
        return f"{field} is required." if field else "Request body is required."
    if error.get("type") == "value_error":
        return message.removeprefix("Value error, ")
    if field:
        return f"Invalid {field}: {message}"
    return message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else jsonable_encoder(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_error(exc)
    logger.info(f"Validation failed for {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Constraint violation on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": DUPLICATE_MESSAGE})


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
