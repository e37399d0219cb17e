"""Application factory for creating and configuring the FastAPI application."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from tasktracker.adapters.api.v1 import api_router
from tasktracker.core.config.settings import settings
from tasktracker.core.handlers import register_exception_handlers
from tasktracker.core.lifecycle import create_lifespan_manager
from tasktracker.core.middleware import configure_middleware


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Task tracker authentication and session API.",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    configure_middleware(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app
