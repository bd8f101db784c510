from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from restaurant_api.core.dependencies import get_restaurant_service
from restaurant_api.schemas.restaurant import Restaurant
from restaurant_api.services.restaurant_service import RestaurantService

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])

Service = Annotated[RestaurantService, Depends(get_restaurant_service)]

# Validated by the service so every body problem maps to the same 400 message
RawBody = Annotated[Any, Body()]


@router.get("", response_model=list[Restaurant])
async def list_restaurants(service: Service) -> list[Restaurant]:
    """List every restaurant ordered by ascending id (empty list when none)."""
    return await service.list_restaurants()


@router.get("/{restaurant_id}", response_model=Restaurant)
async def get_restaurant(restaurant_id: str, service: Service) -> Restaurant:
    return await service.get_restaurant(restaurant_id)


@router.post("", response_model=Restaurant, status_code=status.HTTP_201_CREATED)
async def create_restaurant(service: Service, body: RawBody = None) -> Restaurant:
    """Create a restaurant from ``{name, cuisine, rating}``.

    Returns:
        Restaurant: The stored row including its generated id (HTTP 201).
    """
    return await service.create_restaurant(body)


@router.put("/{restaurant_id}", response_model=Restaurant)
async def update_restaurant(restaurant_id: str, service: Service, body: RawBody = None) -> Restaurant:
    """Replace all fields of a restaurant; partial bodies are rejected."""
    return await service.update_restaurant(restaurant_id, body)


@router.delete("/{restaurant_id}", response_model=Restaurant)
async def delete_restaurant(restaurant_id: str, service: Service) -> Restaurant:
    """Delete a restaurant and return its last state."""
    return await service.delete_restaurant(restaurant_id)
