#!/usr/bin/env python3
"""
Error handlers for the web application.

Engine exceptions are mapped to HTTP status codes:
    ValidationError    -> 400
    MatchNotFoundError -> 404
    other MatchingError -> 500
"""

import logging
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import MatchingError, MatchNotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "type": error_type
        }
    )


async def matching_exception_handler(
    request: Request,
    exc: MatchingError
) -> JSONResponse:
    """
    Handle matching engine exceptions.

    Args:
        request: The FastAPI request.
        exc: The engine exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    if isinstance(exc, MatchNotFoundError):
        status_code = 404
    elif isinstance(exc, ValidationError):
        status_code = 400

    if status_code >= 500:
        logger.error(f"Matching error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"Rejected request to {request.url.path}: {exc}")

    return _error_response(status_code, str(exc), exc.__class__.__name__)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies use the same 400 envelope as engine validation errors."""
    messages = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return _error_response(400, "; ".join(messages), "ValidationError")


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return _error_response(exc.status_code, exc.detail, "HTTPException")


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")
    return _error_response(500, "Internal server error", "InternalError")
