"""Error taxonomy and the FastAPI handlers that render it."""

from __future__ import annotations

import enum
import logging
from typing import Any, Sequence

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"


class ErrorKind(enum.Enum):
    BAD_REQUEST = (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST")
    NOT_FOUND = (status.HTTP_404_NOT_FOUND, "NOT_FOUND")
    DATABASE = (status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR")
    INTERNAL = (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR")

    def __init__(self, status_code: int, category: str) -> None:
        self.status_code = status_code
        self.category = category


class AppError(Exception):
    """A classified failure carrying a stable category and a message."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def category(self) -> str:
        return self.kind.category

    @classmethod
    def bad_request(cls, message: str) -> "AppError":
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def not_found(cls, message: str) -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def database(cls, message: str) -> "AppError":
        return cls(ErrorKind.DATABASE, message)

    @classmethod
    def internal(cls, message: str) -> "AppError":
        return cls(ErrorKind.INTERNAL, message)

    def __repr__(self) -> str:
        return f"AppError({self.kind.name}, {self.message!r})"


class ErrorResponse(BaseModel):
    error: str
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: str = VALIDATION_ERROR
    errors: list[FieldError]


# Errors that concern the body as a whole rather than one of its fields.
_BODY_ERROR_TYPES = {"json_invalid", "model_attributes_type", "dict_type", "model_type"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in {"body", "query", "path"}:
        parts = parts[1:]
    return ".".join(str(part) for part in parts) or "body"


def validation_message(error: dict[str, Any]) -> str:
    """Render one pydantic error entry as a human-readable reason."""

    field = _field_name(error.get("loc", ()))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind in {"missing", "required"}:
        return f"{field} is required"
    if kind == "email":
        return "Invalid email format"
    if kind == "string_too_short":
        return f"{field} must be at least {ctx.get('min_length')} characters"
    if kind == "string_too_long":
        return f"{field} must not exceed {ctx.get('max_length')} characters"
    return f"Validation failed for {field}"


def _is_body_error(error: dict[str, Any]) -> bool:
    loc = tuple(error.get("loc", ()))
    if error.get("type") in _BODY_ERROR_TYPES:
        return True
    return loc == ("body",)


def error_response(exc: AppError) -> JSONResponse:
    body = ErrorResponse(error=exc.category, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = list(exc.errors())
    body_errors = [e for e in errors if _is_body_error(e)]
    if body_errors:
        message = str(body_errors[0].get("msg") or "Invalid request body")
        return error_response(AppError.bad_request(message))
    payload = ValidationErrorResponse(
        errors=[
            FieldError(field=_field_name(e.get("loc", ())), message=validation_message(e))
            for e in errors
        ]
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(payload.model_dump()),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return error_response(AppError.internal(str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = [
    "AppError",
    "ErrorKind",
    "ErrorResponse",
    "FieldError",
    "ValidationErrorResponse",
    "register_exception_handlers",
    "validation_message",
]
