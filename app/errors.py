"""Service-level errors and their mapping to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class OpportunityServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class OpportunityStoreError(OpportunityServiceError):
    """The store rejected or failed a read; the request is not retried."""

    status_code = 500


class OpportunityNotFoundError(OpportunityServiceError):
    status_code = 404


class OpportunityAccessDeniedError(OpportunityServiceError):
    status_code = 403


class AuthenticationError(OpportunityServiceError):
    status_code = 401


class InvalidQueryParameterError(OpportunityServiceError):
    status_code = 400


def _error_response(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _service_error_handler(request: Request, exc: OpportunityServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error_response(exc.status_code, detail)


def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "path": ".".join(str(x) for x in (e.get("loc") or ()) if x not in ("query", "body")),
            "message": e.get("msg", "Invalid value"),
        }
        for e in exc.errors()
    ]
    return _error_response(400, "Invalid query parameters", details=details)


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return _error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OpportunityServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)
