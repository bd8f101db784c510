"""In-memory restaurant store.

Per-process only and lost on restart; used by the test-suite and for local
runs without a database (``DB_BACKEND=memory``).
"""

from __future__ import annotations

from restaurant_api.adapters.store.base import AbstractRestaurantStore
from restaurant_api.schemas.restaurant import Restaurant, RestaurantPayload


class InMemoryRestaurantStore(AbstractRestaurantStore):
    """Dict-backed store with a monotonically increasing id sequence."""

    def __init__(self) -> None:
        self._rows: dict[int, Restaurant] = {}
        self._next_id = 1

    async def list_all(self) -> list[Restaurant]:
        return [self._rows[key] for key in sorted(self._rows)]

    async def get(self, restaurant_id: int) -> Restaurant | None:
        return self._rows.get(restaurant_id)

    async def create(self, payload: RestaurantPayload) -> Restaurant:
        restaurant = Restaurant(id=self._next_id, **payload.model_dump())
        self._rows[restaurant.id] = restaurant
        # Ids are never reused, even after deletes
        self._next_id += 1
        return restaurant

    async def update(self, restaurant_id: int, payload: RestaurantPayload) -> Restaurant | None:
        if restaurant_id not in self._rows:
            return None
        restaurant = Restaurant(id=restaurant_id, **payload.model_dump())
        self._rows[restaurant_id] = restaurant
        return restaurant

    async def delete(self, restaurant_id: int) -> Restaurant | None:
        return self._rows.pop(restaurant_id, None)
