"""Response envelope shared by every endpoint, and the exception handlers
that render domain errors into it.

Successful responses look like ``{"success": true, "message": ..., "data": ...}``;
failures like ``{"success": false, "message": ..., "error": ...}``.
"""

from typing import Generic, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import (
    ExpectedVersionError,
    InvalidDataError,
    ObjectNotFoundError,
    ValidationError,
)
from pydantic import BaseModel

from storefront.domain import logger
from storefront.errors import NotAuthenticated, PermissionDenied

T = TypeVar("T")

CONFLICT_MESSAGE = "The resource was modified by another request. Please retry."
SERVER_ERROR_MESSAGE = "Something went wrong. Please try again later."


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class Page(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: list[T]
    pagination: Pagination


def error_response(status_code: int, message: str, error=None, **extra) -> JSONResponse:
    content = {"success": False, "message": message, "error": error if error is not None else message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def first_message(messages) -> str:
    """Pick a human-readable summary out of a Protean error payload."""
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list | tuple) and value:
                return str(value[0])
            if value:
                return str(value)
        return "Validation failed"
    if isinstance(messages, list | tuple) and messages:
        return str(messages[0])
    return str(messages)


def _request_errors(exc: RequestValidationError) -> dict:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in err.get("loc", ())[1:]] or ["request"]
        errors.setdefault(".".join(loc), []).append(err.get("msg", "Invalid value"))
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    @app.exception_handler(InvalidDataError)
    async def validation_error_handler(request: Request, exc: ValidationError | InvalidDataError) -> JSONResponse:
        return error_response(400, first_message(exc.messages), exc.messages)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _request_errors(exc)
        return error_response(400, first_message(errors), errors)

    @app.exception_handler(NotAuthenticated)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticated) -> JSONResponse:
        return error_response(401, str(exc))

    @app.exception_handler(PermissionDenied)
    async def permission_denied_handler(request: Request, exc: PermissionDenied) -> JSONResponse:
        return error_response(403, str(exc))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return error_response(404, str(exc))

    @app.exception_handler(ExpectedVersionError)
    async def conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("concurrent_modification", path=request.url.path, detail=str(exc))
        return error_response(409, CONFLICT_MESSAGE)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return error_response(500, SERVER_ERROR_MESSAGE)
