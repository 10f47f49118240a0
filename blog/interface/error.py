"""Interface layer error handling.

Maps domain errors to HTTP responses. Every comment error is a client
error; anything else propagates to FastAPI's default 500 handling.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from blog.domain.error import (
    InvalidRelationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logfire.warn(
        "Resource not found",
        resource=exc.resource,
        identifier=exc.identifier,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


async def invalid_relation_handler(
    request: Request, exc: InvalidRelationError
) -> JSONResponse:
    logfire.warn(
        "Invalid parent comment",
        parent_id=exc.parent_id,
        post_id=exc.post_id,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logfire.warn("Comment validation failed", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


async def not_authorized_handler(
    request: Request, exc: NotAuthorizedError
) -> JSONResponse:
    logfire.warn("Unauthorized comment operation", error=str(exc), action=exc.action)
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on the application."""
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InvalidRelationError, invalid_relation_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(NotAuthorizedError, not_authorized_handler)
