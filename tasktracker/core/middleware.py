"""Middleware configuration for the FastAPI application.

Registers CORS and the correlation-id middleware that tags every log event of
a request with the same id.
"""

import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tasktracker.core.config.settings import settings

REQUEST_ID_HEADER = "X-Request-ID"


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.middleware("http")(correlation_id_middleware)


async def correlation_id_middleware(request: Request, call_next):
    """Bind a correlation id to the structlog context for the request.

    An incoming ``X-Request-ID`` is reused, otherwise a new one is generated.
    The id is echoed back in the response header and kept on
    ``request.state.correlation_id`` for route handlers.
    """
    correlation_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.correlation_id = correlation_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.unbind_contextvars("correlation_id")
    response.headers[REQUEST_ID_HEADER] = correlation_id
    return response
