"""PostgreSQL restaurant store backed by an asyncpg connection pool.

Table schema:
- id (SERIAL PRIMARY KEY)
- name, cuisine (TEXT NOT NULL)
- rating (DOUBLE PRECISION NOT NULL)

Each operation acquires one pooled connection and runs exactly one
parameterized statement; there is no transaction demarcation.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import asyncpg

from restaurant_api.adapters.store.base import AbstractRestaurantStore
from restaurant_api.core.config import IDENTIFIER_PATTERN, DatabaseSettings
from restaurant_api.core.errors import INTERNAL_ERROR_MESSAGE, StoreAppError
from restaurant_api.schemas.restaurant import Restaurant, RestaurantPayload

logger = logging.getLogger(__name__)

COLUMNS = "id, name, cuisine, rating"


def _sanitize_table_name(name: str) -> str:
    """Ensure the table name is safe for SQL interpolation."""
    if not name:
        raise ValueError("table_name cannot be empty")
    if not IDENTIFIER_PATTERN.fullmatch(name):
        raise ValueError(f"Invalid table name: {name!r}")
    return name


def _row_to_restaurant(row: Any) -> Restaurant:
    return Restaurant.model_validate(dict(row))


class PostgresRestaurantStore(AbstractRestaurantStore):
    """asyncpg implementation of ``AbstractRestaurantStore``."""

    TABLE_NAME = "restaurants"

    def __init__(self, pool: Any, table_name: str | None = None) -> None:  # pool: asyncpg.Pool
        self._pool = pool
        self._table = _sanitize_table_name(table_name or self.TABLE_NAME)

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[Any]:
        """Acquire a pooled connection, converting any failure to StoreAppError.

        The original exception is logged here and chained, but its text never
        reaches the error's message.
        """
        try:
            async with self._pool.acquire() as conn:
                yield conn
        except StoreAppError:
            raise
        except Exception as exc:
            logger.error(
                "store.query_failed",
                extra={
                    "operation": operation,
                    "table": self._table,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise StoreAppError(
                code="store_error",
                message=INTERNAL_ERROR_MESSAGE,
                details={"operation": operation, "error_type": type(exc).__name__},
            ) from exc

    async def ensure_schema(self) -> None:
        """Create the restaurants table if it doesn't exist."""
        ddl = f'''
        CREATE TABLE IF NOT EXISTS "{self._table}" (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            cuisine TEXT NOT NULL,
            rating DOUBLE PRECISION NOT NULL
        )
        '''
        async with self._connection("ensure_schema") as conn:
            await conn.execute(ddl)
        logger.info("store.schema_ensured", extra={"table": self._table})

    async def list_all(self) -> list[Restaurant]:
        q = f'SELECT {COLUMNS} FROM "{self._table}" ORDER BY id ASC'
        async with self._connection("list") as conn:
            rows = await conn.fetch(q)
        return [_row_to_restaurant(row) for row in rows]

    async def get(self, restaurant_id: int) -> Restaurant | None:
        q = f'SELECT {COLUMNS} FROM "{self._table}" WHERE id = $1'
        async with self._connection("get") as conn:
            row = await conn.fetchrow(q, restaurant_id)
        return _row_to_restaurant(row) if row is not None else None

    async def create(self, payload: RestaurantPayload) -> Restaurant:
        q = f'''
        INSERT INTO "{self._table}" (name, cuisine, rating)
        VALUES ($1, $2, $3)
        RETURNING {COLUMNS}
        '''
        async with self._connection("create") as conn:
            row = await conn.fetchrow(q, payload.name, payload.cuisine, float(payload.rating))
        return _row_to_restaurant(row)

    async def update(self, restaurant_id: int, payload: RestaurantPayload) -> Restaurant | None:
        q = f'''
        UPDATE "{self._table}"
        SET name = $1, cuisine = $2, rating = $3
        WHERE id = $4
        RETURNING {COLUMNS}
        '''
        async with self._connection("update") as conn:
            row = await conn.fetchrow(
                q, payload.name, payload.cuisine, float(payload.rating), restaurant_id
            )
        return _row_to_restaurant(row) if row is not None else None

    async def delete(self, restaurant_id: int) -> Restaurant | None:
        q = f'DELETE FROM "{self._table}" WHERE id = $1 RETURNING {COLUMNS}'
        async with self._connection("delete") as conn:
            row = await conn.fetchrow(q, restaurant_id)
        return _row_to_restaurant(row) if row is not None else None

    async def close(self) -> None:
        await self._pool.close()


async def create_pool(db: DatabaseSettings) -> asyncpg.Pool:
    """Open the process-wide asyncpg pool described by ``db``."""
    logger.info(
        "store.pool_opening",
        extra={
            "host": db.host if not db.url else None,
            "database": db.name if not db.url else None,
            "min_size": db.pool_min_size,
            "max_size": db.pool_max_size,
        },
    )
    return await asyncpg.create_pool(
        dsn=db.dsn,
        min_size=db.pool_min_size,
        max_size=db.pool_max_size,
        command_timeout=db.command_timeout,
    )
