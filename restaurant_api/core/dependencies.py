"""FastAPI dependencies wiring the store into request handlers.

The store is created once by the application lifespan and kept on
``app.state``; handlers receive it through ``Depends`` so tests can swap it
with ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from restaurant_api.adapters.store.base import AbstractRestaurantStore
from restaurant_api.services.restaurant_service import RestaurantService


def get_restaurant_store(request: Request) -> AbstractRestaurantStore:
    store = getattr(request.app.state, "restaurant_store", None)
    if store is None:
        raise RuntimeError("Restaurant store is not initialized; is the app lifespan running?")
    return store


def get_restaurant_service(
    store: Annotated[AbstractRestaurantStore, Depends(get_restaurant_store)],
) -> RestaurantService:
    return RestaurantService(store)
