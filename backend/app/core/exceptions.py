"""Application errors and their HTTP translation"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status and a stable code"""

    status_code = 500
    code = "SERVER_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND_ERROR"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT_ERROR"

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)


class ValidationError(AppError):
    """Rejected input; ``reason`` names the rule that failed"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class SlugGenerationError(ConflictError):
    """No free slug could be found for a base slug"""


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    content = {"detail": exc.message, "code": exc.code}
    reason = getattr(exc, "reason", None)
    if reason:
        content["reason"] = reason
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # unique index on slug/location is the last line against concurrent writers
    logger.warning(f"{request.method} {request.url.path} hit a constraint: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"detail": "Resource conflicts with an existing record", "code": ConflictError.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
