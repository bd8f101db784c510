"""Restaurant CRUD service.

Validates input, delegates to the store, and turns "no such row" into
``NotFoundAppError``. It returns domain values only; status codes are chosen
by the exception handlers.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError

from restaurant_api.adapters.store.base import AbstractRestaurantStore
from restaurant_api.core.errors import (
    NOT_FOUND_MESSAGE,
    VALIDATION_MESSAGE,
    NotFoundAppError,
    ValidationAppError,
)
from restaurant_api.schemas.restaurant import Restaurant, RestaurantPayload

logger = logging.getLogger(__name__)

# Upper bound of a PostgreSQL SERIAL column
MAX_RESTAURANT_ID = 2_147_483_647

_ID_PATTERN = re.compile(r"[0-9]+")


def _not_found(raw_id: str) -> NotFoundAppError:
    return NotFoundAppError(
        code="restaurant_not_found",
        message=NOT_FOUND_MESSAGE,
        details={"restaurant_id": raw_id},
    )


def parse_restaurant_id(raw_id: str) -> int:
    """Convert a path segment to a restaurant id.

    Anything that cannot name a stored row (non-digits, zero, values beyond
    the SERIAL range) is reported as not found without querying the store.

    Raises:
        NotFoundAppError: If ``raw_id`` is not a valid id.
    """
    if not _ID_PATTERN.fullmatch(raw_id):
        raise _not_found(raw_id)
    restaurant_id = int(raw_id)
    if not 1 <= restaurant_id <= MAX_RESTAURANT_ID:
        raise _not_found(raw_id)
    return restaurant_id


def validate_payload(body: Any) -> RestaurantPayload:
    """Validate a create/update body.

    ``name`` and ``cuisine`` must be non-empty strings and ``rating`` a JSON
    number; numeric strings such as ``"5"`` and booleans are rejected.

    Raises:
        ValidationAppError: With the fixed client-facing message.
    """
    try:
        return RestaurantPayload.model_validate(body)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        logger.info("restaurant.validation_failed", extra={"fields": fields})
        raise ValidationAppError(
            code="invalid_restaurant",
            message=VALIDATION_MESSAGE,
            details={"field": ",".join(fields)} if fields else None,
        ) from exc


class RestaurantService:
    """CRUD operations over the restaurants resource."""

    def __init__(self, store: AbstractRestaurantStore) -> None:
        self._store = store

    async def list_restaurants(self) -> list[Restaurant]:
        return await self._store.list_all()

    async def get_restaurant(self, raw_id: str) -> Restaurant:
        restaurant = await self._store.get(parse_restaurant_id(raw_id))
        if restaurant is None:
            raise _not_found(raw_id)
        return restaurant

    async def create_restaurant(self, body: Any) -> Restaurant:
        payload = validate_payload(body)
        restaurant = await self._store.create(payload)
        logger.info("restaurant.created", extra={"restaurant_id": restaurant.id})
        return restaurant

    async def update_restaurant(self, raw_id: str, body: Any) -> Restaurant:
        """Replace every field of an existing restaurant.

        The body is validated before the id so a bad payload is always a 400,
        whatever the path says.
        """
        payload = validate_payload(body)
        restaurant = await self._store.update(parse_restaurant_id(raw_id), payload)
        if restaurant is None:
            raise _not_found(raw_id)
        logger.info("restaurant.updated", extra={"restaurant_id": restaurant.id})
        return restaurant

    async def delete_restaurant(self, raw_id: str) -> Restaurant:
        restaurant = await self._store.delete(parse_restaurant_id(raw_id))
        if restaurant is None:
            raise _not_found(raw_id)
        logger.info("restaurant.deleted", extra={"restaurant_id": restaurant.id})
        return restaurant
