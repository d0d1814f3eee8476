"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import Settings, get_settings
from .dependencies import ServiceContainer
from .routes import health, users, bag_types, cars, locations, bag_usage, family, social
from modules.billing.routes import router as billing_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Starts the service container on startup and shuts it down on exit.
    """
    container: ServiceContainer = app.state.container
    settings = container.settings
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    await container.startup()
    yield
    await container.shutdown()
    logger.info("Shutting down %s", settings.app_name)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to get_settings()
        container: Prebuilt service container, e.g. with an in-memory
            repository for tests; defaults to one built from settings

    Returns:
        Configured FastAPI instance
    """
    if settings is None:
        settings = container.settings if container is not None else get_settings()
    if container is None:
        container = ServiceContainer(settings)

    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Reusable bag tracking and savings API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )
    app.state.container = container

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(bag_types.router, prefix="/api", tags=["bag-types"])
    app.include_router(cars.router, prefix="/api", tags=["cars"])
    app.include_router(locations.router, prefix="/api", tags=["locations"])
    app.include_router(bag_usage.router, prefix="/api", tags=["bag-usage"])
    app.include_router(family.router, prefix="/api", tags=["family"])
    app.include_router(social.router, prefix="/api", tags=["social"])
    app.include_router(billing_router, prefix="/api", tags=["billing"])

    return app


# Application instance for uvicorn
app = create_app()
