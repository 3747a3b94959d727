"""Domain error hierarchy and the handlers that render it as envelopes."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from http import HTTPStatus
from typing import Any, ClassVar, Iterator, Mapping

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.envelope import ErrorResponse

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for errors that map onto an HTTP error envelope.

    Subclasses set ``default_message``, ``code``, ``status_code`` and
    ``headers``; any of them can be overridden per instance.
    """

    default_message: ClassVar[str] = "Request failed."
    code: str = "application_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    headers: Mapping[str, str] | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        if headers is not None:
            self.headers = dict(headers)
        self.details = details


class ValidationError(ApplicationError):
    """Input or business-rule validation failure."""

    default_message = "Validation failed."
    code = "validation_error"


class DuplicateEmailError(ApplicationError):
    default_message = "User already exists with this email."
    code = "duplicate_email"


class InvalidCredentialsError(ApplicationError):
    """A password check failed.

    Login reports this as 401. Password changes pass ``status_code=400`` since
    the caller is already authenticated.
    """

    default_message = "Invalid email or password."
    code = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED


class UnauthorizedError(ApplicationError):
    """Missing or unusable credentials on a protected route."""

    default_message = "Access denied. No token provided."
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(UnauthorizedError):
    """Token is malformed, expired, badly signed or names a missing user."""

    default_message = "Invalid or expired token."
    code = "invalid_token"


class NotFoundError(ApplicationError):
    """Missing resource, or one owned by somebody else."""

    default_message = "Resource not found."
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ServerError(ApplicationError):
    """Unexpected failure whose cause is kept out of the response."""

    default_message = "Internal server error."
    code = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# Codes for errors raised by Starlette itself, e.g. unknown routes.
_HTTP_ERROR_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_429_TOO_MANY_REQUESTS: "rate_limited",
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or None


@contextmanager
def _request_context(request: Request) -> Iterator[None]:
    """Rebind the request id while a handler runs outside the middleware's context."""
    request_id = _request_id(request)
    token = bind_request_id(request_id) if request_id else None
    try:
        yield
    finally:
        if token is not None:
            reset_request_id(token)


def _with_request_id(request: Request, details: Any | None) -> Any | None:
    request_id = _request_id(request)
    if request_id is None:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        return {"request_id": request_id, **details} if "request_id" not in details else details
    return {"request_id": request_id, "detail": details}


def _log_failure(message: str, *, status_code: int, code: str, **extra: Any) -> None:
    level = logging.ERROR if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logging.WARNING
    logger.log(level, message, extra={"code": code, "status_code": status_code, **extra})


def error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Build the ``success: false`` envelope, echoing the request id."""

    body = ErrorResponse(code=code, message=message, details=_with_request_id(request, details))
    response = JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)
    request_id = _request_id(request)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _describe_http_exception(exc: StarletteHTTPException) -> tuple[str, Any | None]:
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail in (None, "Not Found"):
        return "Route not found.", None
    if isinstance(detail, str):
        return detail, None
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    if isinstance(detail, list):
        return phrase, {"errors": detail}
    return phrase, detail


def _validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return jsonable_encoder(
        [{key: value for key, value in error.items() if key not in {"ctx", "url"}} for error in exc.errors()]
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error raised by ``app`` as the ``success: false`` envelope."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        with _request_context(request):
            _log_failure("Application error encountered", status_code=exc.status_code, code=exc.code)
            return error_response(
                request,
                status_code=exc.status_code,
                code=exc.code,
                message=exc.message,
                details=exc.details,
                headers=exc.headers,
            )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        with _request_context(request):
            errors = _validation_errors(exc)
            _log_failure(
                "Request validation failed",
                status_code=status.HTTP_400_BAD_REQUEST,
                code=ValidationError.code,
                errors=errors,
            )
            return error_response(
                request,
                status_code=status.HTTP_400_BAD_REQUEST,
                code=ValidationError.code,
                message="Request validation failed.",
                details={"errors": errors},
            )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        with _request_context(request):
            code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
            message, details = _describe_http_exception(exc)
            _log_failure("HTTP exception raised", status_code=exc.status_code, code=code, path=request.url.path)
            return error_response(
                request,
                status_code=exc.status_code,
                code=code,
                message=message,
                details=details,
                headers=exc.headers or None,
            )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        with _request_context(request):
            logger.exception("Unhandled application error.")
            return error_response(
                request,
                status_code=ServerError.status_code,
                code=ServerError.code,
                message=ServerError.default_message,
            )


__all__ = [
    "ApplicationError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotFoundError",
    "ServerError",
    "UnauthorizedError",
    "ValidationError",
    "error_response",
    "register_exception_handlers",
]
