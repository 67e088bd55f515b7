"""
HTTP middlewares: request context binding and access logging.
"""
from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Dict

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from hostel_allocator.core.logging import actor_email, get_logger, request_id as request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
ACTOR_HEADER = "X-Admin-Email"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds the request id and acting admin for the duration of a request.

    A caller-supplied X-Request-ID is reused, otherwise one is generated; it is
    echoed back on the response. X-Admin-Email, when present, becomes the actor
    recorded on activity events.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = rid

        id_token = request_id_var.set(rid)
        actor_token = actor_email.set(request.headers.get(ACTOR_HEADER))
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(id_token)
            actor_email.reset(actor_token)

        response.headers[self.header_name] = rid
        return response


def _request_fields(request: Request) -> Dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs every request with its status and duration; sets X-Process-Time."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                f"{request.method} {request.url.path} raised {type(exc).__name__}",
                extra=_request_fields(request),
            )
            raise

        elapsed = time.perf_counter() - started
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        fields = _request_fields(request)
        fields.update(status_code=response.status_code, process_time=round(elapsed, 4))
        if response.status_code >= 400:
            logger.warning(f"{request.method} {request.url.path} -> {response.status_code}", extra=fields)
        else:
            logger.info(f"{request.method} {request.url.path} -> {response.status_code}", extra=fields)
        return response


def register_middlewares(app: FastAPI) -> None:
    """
    Install the middlewares on ``app``.

    Starlette runs the last-added middleware outermost, so the request context
    is bound before the access log records anything.
    """
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestContextMiddleware)
    logger.debug("Middlewares registered")


__all__ = [
    "RequestContextMiddleware",
    "AccessLogMiddleware",
    "register_middlewares",
    "ACTOR_HEADER",
    "REQUEST_ID_HEADER",
]
