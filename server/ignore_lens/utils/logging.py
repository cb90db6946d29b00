"""Structured JSON logging and request correlation for the lens service."""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any, Dict

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "request_id",
    }
)


class RequestIdFilter(logging.Filter):
    """Attach the current request ID (if any) to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Fields passed through ``extra=`` are copied to the top level of the
    payload, so ``logger.info("evaluation_completed", extra={"duration_ms": 3})``
    yields ``{"message": "evaluation_completed", "duration_ms": 3, ...}``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            payload["request_id"] = request_id

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in payload:
                payload[key] = value

        return json.dumps(payload, default=str)


def configure_logging(level: int | str = logging.INFO, stream: IO[str] | None = None) -> None:
    """Route root logging through a single JSON handler (stderr by default)."""

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())

    logging.basicConfig(level=level, handlers=[handler], force=True)
    # one debug record per inotify event otherwise
    logging.getLogger("watchdog").setLevel(logging.WARNING)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log its start, end and failures."""

    def __init__(self, app, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name
        self._logger = logging.getLogger("ignore_lens.request")

    def _log_finished(self, request, status_code: int, start: float, *, failed: bool) -> None:
        fields = {
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": int((time.time() - start) * 1000),
        }
        if not failed:
            self._logger.info("request_completed", extra=fields)
        elif status_code >= 500:
            self._logger.exception("request_failed", extra=fields)
        else:
            self._logger.warning("request_failed", extra=fields)

    async def dispatch(self, request, call_next):
        request_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        token = REQUEST_ID_CTX.set(request_id)
        start = time.time()
        self._logger.info(
            "request_started",
            extra={"method": request.method, "path": request.url.path},
        )

        try:
            response = await call_next(request)
        except HTTPException as exc:
            self._log_finished(request, exc.status_code, start, failed=True)
            response = JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
            for header_name, header_value in (exc.headers or {}).items():
                response.headers[header_name] = header_value
        except Exception:
            self._log_finished(request, 500, start, failed=True)
            response = JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
        else:
            self._log_finished(request, response.status_code, start, failed=False)
        finally:
            REQUEST_ID_CTX.reset(token)

        response.headers[self.header_name] = request_id
        return response
