"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from task_manager.errors import DomainError
from task_manager.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed with %s: %r",
            request.method,
            request.url.path,
            exc.kind,
            exc.__cause__,
        )
    return _error_response(exc.status_code, exc.message, exc.kind)


def register_exception_handlers(app: FastAPI):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainError, domain_error_handler)
