from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hostel_allocator import __version__
from hostel_allocator.api.v1.router import router as api_v1_router
from hostel_allocator.config.settings import settings
from hostel_allocator.core.exceptions import BaseAppException
from hostel_allocator.core.logging import get_logger, setup_logging
from hostel_allocator.core.middleware import register_middlewares
from hostel_allocator.db.init_db import init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema creation for dev/demo only; production runs migrations
    if not settings.is_production():
        init_db()
    logger.info(
        "Application started",
        extra={"environment": settings.ENVIRONMENT, "version": __version__},
    )
    yield
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, core middleware and the domain exception handler.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID, timing and error logging
    register_middlewares(app)

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    return app


app = create_app()
