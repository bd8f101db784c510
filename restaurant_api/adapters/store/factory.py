"""Factory for the restaurant store selected by settings."""

from __future__ import annotations

import logging

from restaurant_api.adapters.store.base import AbstractRestaurantStore
from restaurant_api.adapters.store.in_memory import InMemoryRestaurantStore
from restaurant_api.adapters.store.postgres import PostgresRestaurantStore, create_pool
from restaurant_api.core.config import DatabaseSettings, settings
from restaurant_api.core.errors import StoreAppError, ValidationAppError

logger = logging.getLogger(__name__)


async def create_restaurant_store(db: DatabaseSettings | None = None) -> AbstractRestaurantStore:
    """Instantiate the configured store backend.

    For ``postgres`` this opens the asyncpg pool and, when
    ``DB_CREATE_SCHEMA`` is set, creates the table if missing.

    Args:
        db: Database settings; defaults to the global settings.

    Returns:
        AbstractRestaurantStore: Ready-to-use store.

    Raises:
        ValidationAppError: If the backend name is unknown.
    """
    cfg = db or settings.db
    backend = cfg.backend.lower()

    if backend == "memory":
        logger.info("store.backend_selected", extra={"backend": backend})
        return InMemoryRestaurantStore()

    if backend == "postgres":
        pool = await create_pool(cfg)
        store = PostgresRestaurantStore(pool, table_name=cfg.table)
        if cfg.create_schema:
            try:
                await store.ensure_schema()
            except StoreAppError:
                await store.close()
                raise
        logger.info("store.backend_selected", extra={"backend": backend, "table": cfg.table})
        return store

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown store backend: '{cfg.backend}'. Supported backends: postgres, memory",
    )
