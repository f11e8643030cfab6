"""Typed errors raised by the pricing, aggregate and gateway layers.

    AppError
    +-- ValidationError      caller data breaks a precondition (422)
    +-- NotFoundError        referenced project/item/material is missing (404)
    +-- DataIntegrityError   stored data references something that no longer exists (409)
    +-- PersistenceError     database or storage operation failed (503)

Each class carries a machine-readable ``code``; the handlers below turn them
into JSON responses of the form ``{"detail": ..., "code": ...}``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.logging_config import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    code = "APP_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class DataIntegrityError(AppError):
    code = "DATA_INTEGRITY_ERROR"
    status_code = 409


class PersistenceError(AppError):
    code = "PERSISTENCE_ERROR"
    status_code = 503


def _app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = {"detail": exc.message, "code": exc.code}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return JSONResponse(status_code=exc.status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
