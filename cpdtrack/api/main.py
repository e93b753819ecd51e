"""
cpdtrack API Main Application
=============================

FastAPI application entry point for the compliance analytics API.

Features:
    - OpenAPI documentation at /docs
    - Health, rule pack, benchmarking and firm endpoints
    - CORS middleware for cross-origin requests
    - Async lifespan management

Usage:
    # Development:
    uvicorn cpdtrack.api.main:app --reload

    # Production:
    uvicorn cpdtrack.api.main:app --host 0.0.0.0 --port 8000

Author: cpdtrack Team
Version: 1.0.0
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cpdtrack.config import settings
from cpdtrack.errors import InvalidInputError, NotFoundError
from cpdtrack.api.dependencies import ServiceContainer
from cpdtrack.api.routes import (
    benchmarking_router,
    firms_router,
    health_router,
    rule_packs_router,
)


# Configure structured logging
from cpdtrack.logging import setup_logging, get_logger, RequestLoggingMiddleware
setup_logging(level=settings.log_level, json_output=not settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown of the store backend.
    """
    logger.info("api_starting")

    container = ServiceContainer.get_instance()
    await container.initialize()

    logger.info("api_started", store=container.backend)

    yield

    logger.info("api_stopping")
    await container.shutdown()
    logger.info("api_stopped")


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title="cpdtrack API",
        description=(
            "CE/CPD compliance analytics API\n\n"
            "- Rule pack resolution per credential and date\n"
            "- Cohort benchmarking against credential peers\n"
            "- Member risk scoring for firm administrators"
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(InvalidInputError, _invalid_input_handler)

    # Register routers
    app.include_router(health_router)
    app.include_router(rule_packs_router)
    app.include_router(benchmarking_router)
    app.include_router(firms_router)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint returning API info."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cpdtrack.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
