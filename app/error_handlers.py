"""Exception handlers mapping service errors onto the JSON response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.profession import ErrorResponse
from app.services.errors import (
    InvalidQuery,
    PersistenceError,
    ProfessionNotFound,
    ProfessionServiceError,
    ProfessionValidationError,
    Unauthenticated,
)


logger = logging.getLogger(__name__)


STATUS_BY_ERROR: dict[type[ProfessionServiceError], int] = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    InvalidQuery: status.HTTP_400_BAD_REQUEST,
    ProfessionValidationError: status.HTTP_400_BAD_REQUEST,
    ProfessionNotFound: status.HTTP_404_NOT_FOUND,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: ProfessionServiceError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _envelope(status_code: int, error: str, details: str | None = None, headers: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ProfessionServiceError)
    async def profession_error_handler(request: Request, exc: ProfessionServiceError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                "profession.error path=%s error=%s details=%s",
                request.url.path,
                exc.message,
                exc.details,
                exc_info=exc,
            )
        else:
            logger.info("profession.rejected path=%s status=%s error=%s", request.url.path, status_code, exc.message)
        return _envelope(status_code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [str(error.get("msg")) for error in exc.errors()]
        return _envelope(status.HTTP_400_BAD_REQUEST, ", ".join(messages) or "Invalid request")
