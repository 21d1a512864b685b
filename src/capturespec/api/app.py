"""FastAPI application factory for the capture spec template service."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from capturespec import __version__
from capturespec.api.deps import init_template_service, reset_template_service
from capturespec.api.middleware import RequestTimingMiddleware
from capturespec.api.routers import artifacts, drafts, specs, templates
from capturespec.api.schemas import HealthResponse
from capturespec.persistence.client import PersistenceClient
from capturespec.registry.client import RegistryClient
from capturespec.service.template_service import TemplateService
from capturespec.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Open the registry and persistence clients for the application's lifetime."""
    settings: Settings = app.state.settings
    registry = RegistryClient.from_settings(settings)
    persistence = PersistenceClient.from_settings(settings)
    init_template_service(TemplateService(registry, persistence))
    try:
        yield
    finally:
        reset_template_service()
        await registry.aclose()
        await persistence.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Capture Spec Templates",
        description="Turns schema registry artifacts into data capture spec drafts.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(artifacts.router, prefix="/artifacts", tags=["artifacts"])
    app.include_router(templates.router, prefix="/templates", tags=["templates"])
    app.include_router(drafts.router, prefix="/drafts", tags=["drafts"])
    app.include_router(specs.router, prefix="/specs", tags=["specs"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("capturespec.api")
    logger.info(
        "Capture spec API v%s starting (host=%s, port=%d, registry=%s)",
        __version__, settings.api_server_host, settings.effective_port, settings.registry_url,
    )

    uvicorn.run(
        "capturespec.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
