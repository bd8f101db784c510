"""Restaurant store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from restaurant_api.schemas.restaurant import Restaurant, RestaurantPayload


class AbstractRestaurantStore(ABC):
    """Persistence contract for restaurants.

    Every method issues a single statement. Lookups by id return ``None``
    when no row matches; any failure talking to the backend is raised as
    ``StoreAppError``.
    """

    @abstractmethod
    async def list_all(self) -> list[Restaurant]:
        """Return all restaurants ordered by ascending id."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, restaurant_id: int) -> Restaurant | None:
        raise NotImplementedError

    @abstractmethod
    async def create(self, payload: RestaurantPayload) -> Restaurant:
        """Insert a row and return it with its generated id."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, restaurant_id: int, payload: RestaurantPayload) -> Restaurant | None:
        """Replace all fields of a row; ``None`` when the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, restaurant_id: int) -> Restaurant | None:
        """Delete a row and return its last state; ``None`` when the id is unknown."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources (no-op by default)."""
        return None
