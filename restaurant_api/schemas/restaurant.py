"""Pydantic schemas for the restaurants resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RestaurantPayload(BaseModel):
    """Body accepted by create and full-replace update.

    Strict mode keeps JSON types honest: ``"5"`` is not a rating and ``5`` is
    not a name. Empty strings are rejected; whitespace-only strings are not.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Restaurant name.")
    cuisine: str = Field(..., min_length=1, description="Cuisine served.")
    rating: float = Field(..., allow_inf_nan=False, description="Numeric rating.")


class Restaurant(BaseModel):
    """A stored restaurant row."""

    id: int = Field(..., description="Store-assigned identifier.")
    name: str
    cuisine: str
    rating: float
