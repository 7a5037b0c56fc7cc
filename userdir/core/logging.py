"""Request-scoped logging for the directory service.

A request scope names the operation being served, the target user and a
fresh request id. Every record logged inside the scope carries those
fields, and the scope emits one completion record with the response
status, code and elapsed time.
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime

_REQUEST_FIELDS = ("request_id", "operation", "user_uuid")
_OUTCOME_FIELDS = ("status", "code", "duration_ms")

_access_logger = logging.getLogger("userdir.access")


@dataclass(slots=True)
class RequestScope:
    operation: str
    user_uuid: str | None = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: float = field(default_factory=time.monotonic)
    status: str | None = None

    def complete(self, status: str, code: int) -> None:
        self.status = status
        duration_ms = round((time.monotonic() - self.started_at) * 1000, 2)
        level = logging.ERROR if code >= 500 else logging.INFO
        _access_logger.log(
            level,
            "%s finished with %s (%d)",
            self.operation,
            status,
            code,
            extra={"status": status, "code": code, "duration_ms": duration_ms},
        )


_CURRENT_REQUEST: ContextVar[RequestScope | None] = ContextVar("userdir_request", default=None)


def current_request() -> RequestScope | None:
    return _CURRENT_REQUEST.get()


@contextmanager
def request_scope(operation: str, *, user_uuid: str | None = None) -> Iterator[RequestScope]:
    scope = RequestScope(operation=operation, user_uuid=user_uuid)
    token = _CURRENT_REQUEST.set(scope)
    try:
        yield scope
    finally:
        _CURRENT_REQUEST.reset(token)


class RequestContextFilter(logging.Filter):
    """Stamp records with the active request, or ``None`` outside one."""

    def filter(self, record: logging.LogRecord) -> bool:
        scope = current_request()
        for name in _REQUEST_FIELDS:
            setattr(record, name, getattr(scope, name) if scope is not None else None)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _REQUEST_FIELDS + _OUTCOME_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def setup_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.addFilter(RequestContextFilter())
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s [%(operation)s %(request_id)s] %(message)s"
            )
        )
    root.addHandler(handler)


__all__ = [
    "JsonFormatter",
    "RequestContextFilter",
    "RequestScope",
    "current_request",
    "request_scope",
    "setup_logging",
]
