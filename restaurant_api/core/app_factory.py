"""Application factory for the FastAPI app.

Centralizes app construction (lifespan, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI

from restaurant_api.adapters.store.factory import create_restaurant_store
from restaurant_api.api.routes import health_router, restaurants_router
from restaurant_api.core.config import settings
from restaurant_api.core.exception_handlers import setup_exception_handlers
from restaurant_api.core.logging import configure_logging
from restaurant_api.core.middleware import request_id_middleware
from restaurant_api.core.openapi import apply_openapi_customizations
from restaurant_api.core.rate_limit import enforce_rate_limit

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the restaurant store on startup and close it on shutdown."""
    app.state.restaurant_store = await create_restaurant_store(settings.db)
    logger.info("app.startup", extra={"app_env": settings.app_env})
    try:
        yield
    finally:
        await app.state.restaurant_store.close()
        app.state.restaurant_store = None
        logger.info("app.shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Restaurant API",
        description=(
            "CRUD API over a restaurants table (name, cuisine, rating) with "
            "per-client rate limiting."
        ),
        version="0.3.0",
        lifespan=lifespan,
        # Admission filter runs ahead of every handler
        dependencies=[Depends(enforce_rate_limit)],
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(restaurants_router)

    apply_openapi_customizations(app)

    return app
