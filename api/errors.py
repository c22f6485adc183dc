"""
Exception handlers.

Module exceptions inherit from the shared bases; each base maps to one
HTTP status here so routes can let domain errors propagate.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BloggazersError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Most specific first
STATUS_BY_ERROR: tuple[tuple[type[BloggazersError], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 422),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (ExternalServiceError, 502),
)


def status_for(exc: BloggazersError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def bloggazers_error_handler(request: Request, exc: BloggazersError) -> JSONResponse:
    """Render a domain error as an ErrorResponse."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}")

    body = ErrorResponse(**exc.to_dict())
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BloggazersError, bloggazers_error_handler)
