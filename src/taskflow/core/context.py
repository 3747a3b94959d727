"""Request-scoped context shared with the logging layer."""

from __future__ import annotations

from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_ctx_var: ContextVar[str] = ContextVar("request_id", default="-")
_user_id_ctx_var: ContextVar[str | None] = ContextVar("user_id", default=None)


def get_request_id() -> str:
    """Return the correlation identifier bound to the current request."""

    return _request_id_ctx_var.get()


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id_ctx_var.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id_ctx_var.reset(token)


def get_user_id() -> str | None:
    """Return the authenticated user id for the current request, if any."""

    return _user_id_ctx_var.get()


def bind_user_id(user_id: str | None) -> Token[str | None]:
    return _user_id_ctx_var.set(user_id)


def reset_user_id(token: Token[str | None]) -> None:
    _user_id_ctx_var.reset(token)


__all__ = [
    "REQUEST_ID_HEADER",
    "bind_request_id",
    "bind_user_id",
    "get_request_id",
    "get_user_id",
    "reset_request_id",
    "reset_user_id",
]
