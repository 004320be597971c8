"""Domain errors raised by the catalog layer and their HTTP rendering.

Store and service code raise these; routers never build error responses by
hand. Cross-tenant access is reported as ``NotFoundError`` so other tenants'
ids cannot be probed.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Something went wrong, please try again"


class WhatsOrderError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal"
    default_message = GENERIC_INTERNAL_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"detail": self.message, "code": self.code}


class InvalidInputError(WhatsOrderError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"
    default_message = "Invalid input"


class UnauthorizedError(WhatsOrderError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class NotFoundError(WhatsOrderError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class ConflictError(WhatsOrderError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "conflict"
    default_message = "Already exists"


class LimitExceededError(WhatsOrderError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "limit_exceeded"
    default_message = "Limit reached"


class InternalError(WhatsOrderError):
    pass


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return InvalidInputError.default_message
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg") or InvalidInputError.default_message
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{location}: {message}" if location else message


async def _handle_domain_error(request: Request, exc: WhatsOrderError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": GENERIC_INTERNAL_MESSAGE, "code": exc.code},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidInputError(_validation_message(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def _handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("%s %s store failure", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s unhandled error", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WhatsOrderError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, _handle_store_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
