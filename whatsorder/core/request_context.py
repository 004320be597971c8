from __future__ import annotations

from contextvars import ContextVar


_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)
_BUSINESS_ID_CTX: ContextVar[str | None] = ContextVar("business_id", default=None)
_OWNER_ID_CTX: ContextVar[str | None] = ContextVar("owner_id", default=None)


def set_request_context(
    *, request_id: str | None = None, business_id: str | None = None, owner_id: str | None = None
) -> None:
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if business_id is not None:
        _BUSINESS_ID_CTX.set(business_id)
    if owner_id is not None:
        _OWNER_ID_CTX.set(owner_id)


def get_request_id() -> str | None:
    return _REQUEST_ID_CTX.get()


def get_business_id() -> str | None:
    return _BUSINESS_ID_CTX.get()


def get_owner_id() -> str | None:
    return _OWNER_ID_CTX.get()


def clear_request_context() -> None:
    _REQUEST_ID_CTX.set(None)
    _BUSINESS_ID_CTX.set(None)
    _OWNER_ID_CTX.set(None)
