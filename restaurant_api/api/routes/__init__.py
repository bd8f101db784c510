from __future__ import annotations

from restaurant_api.api.routes.health import router as health_router
from restaurant_api.api.routes.restaurants import router as restaurants_router

__all__ = ["health_router", "restaurants_router"]
