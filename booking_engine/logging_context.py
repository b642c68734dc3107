"""Request-scoped correlation IDs for engine log records.

The HTTP middleware in ``booking_engine.api`` takes the caller's
``X-Request-ID`` header (or mints a ``REQ-xxxxxxxx`` ID), binds it for the
duration of the request and echoes it on the response. The resolver and the
API log through ``get_request_logger``, so a fail-open warning or a
misconfigured-hours warning can be matched to the availability query that
triggered it. Outside a request, records carry ``NO_REQUEST_ID``.
"""

import logging
import uuid
from contextvars import ContextVar, Token

NO_REQUEST_ID = "NO_REQUEST_ID"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def new_request_id() -> str:
    return f"REQ-{uuid.uuid4().hex[:8]}"


def set_request_id(request_id: str) -> Token:
    """Bind ``request_id`` to the current context. Pass the token to reset_request_id."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def get_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Stamps ``record.request_id`` so formatters can use ``%(request_id)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
