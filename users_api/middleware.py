from __future__ import annotations

import contextvars
import logging
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from .errors import INTERNAL_ERROR, INVALID_REQUEST
from .schemas.common import ErrorResponse

REQUEST_ID_HEADER = "X-Request-Id"
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)

access_logger = logging.getLogger("users_api.access")
logger = logging.getLogger(__name__)


def get_request_id() -> str | None:
    return request_id_var.get()


def _error_response(status_code: int, message: str, request: Request, headers: dict | None = None) -> JSONResponse:
    headers = dict(headers or {})
    trace_id = getattr(request.state, "request_id", None) or get_request_id()
    if trace_id:
        headers[REQUEST_ID_HEADER] = trace_id
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers or None,
    )


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id_var.set(request_id)
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        access_logger.info(
            "%s %s %d %.2fms",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            extra={
                "extra_fields": {
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "latency_ms": round(latency_ms, 2),
                }
            },
        )
        return response


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping a handler into a 500 response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error during %s %s", request.method, request.url.path)
            return _error_response(500, INTERNAL_ERROR, request)


def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), request, headers=exc.headers)


def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request body: %s", exc.errors())
    return _error_response(400, INVALID_REQUEST, request)


def setup_middleware(app: FastAPI) -> None:
    # Last added runs first: request id, then access log, then recovery.
    app.add_middleware(RecoveryMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
