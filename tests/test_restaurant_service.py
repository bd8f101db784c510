"""Unit tests for RestaurantService input handling (store mocked)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from restaurant_api.core.errors import NotFoundAppError, ValidationAppError
from restaurant_api.schemas.restaurant import Restaurant
from restaurant_api.services.restaurant_service import (
    MAX_RESTAURANT_ID,
    RestaurantService,
    parse_restaurant_id,
    validate_payload,
)


@pytest.fixture
def store() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(store: AsyncMock) -> RestaurantService:
    return RestaurantService(store)


@pytest.mark.parametrize(("raw", "expected"), [("1", 1), ("42", 42), ("007", 7), (str(MAX_RESTAURANT_ID), MAX_RESTAURANT_ID)])
def test_parse_valid_ids(raw: str, expected: int):
    assert parse_restaurant_id(raw) == expected


@pytest.mark.parametrize("raw", ["", "0", "-3", "+3", "1e3", " 1", "١", str(MAX_RESTAURANT_ID + 1)])
def test_parse_invalid_ids(raw: str):
    with pytest.raises(NotFoundAppError):
        parse_restaurant_id(raw)


def test_whitespace_name_is_accepted():
    payload = validate_payload({"name": " ", "cuisine": "Thai", "rating": 0})

    assert payload.name == " "
    assert payload.rating == 0


def test_validation_error_names_offending_fields():
    with pytest.raises(ValidationAppError) as exc_info:
        validate_payload({"name": "A", "rating": "4"})

    assert exc_info.value.details == {"field": "cuisine,rating"}


def test_invalid_id_never_reaches_store(service: RestaurantService, store: AsyncMock):
    with pytest.raises(NotFoundAppError):
        asyncio.run(service.delete_restaurant("abc"))

    store.delete.assert_not_awaited()


def test_invalid_payload_never_reaches_store(service: RestaurantService, store: AsyncMock):
    with pytest.raises(ValidationAppError):
        asyncio.run(service.update_restaurant("1", {"name": "A", "cuisine": "B"}))

    store.update.assert_not_awaited()


def test_missing_row_maps_to_not_found(service: RestaurantService, store: AsyncMock):
    store.get.return_value = None

    with pytest.raises(NotFoundAppError):
        asyncio.run(service.get_restaurant("5"))

    store.get.assert_awaited_once_with(5)


def test_update_passes_parsed_id_and_payload(service: RestaurantService, store: AsyncMock):
    store.update.return_value = Restaurant(id=5, name="A", cuisine="B", rating=1.0)

    result = asyncio.run(service.update_restaurant("5", {"name": "A", "cuisine": "B", "rating": 1}))

    restaurant_id, payload = store.update.await_args.args
    assert restaurant_id == 5
    assert payload.name == "A"
    assert result.id == 5
