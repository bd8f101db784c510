"""Unit tests for the asyncpg-backed restaurant store.

A fake pool stands in for asyncpg: ``acquire()`` yields a connection whose
``fetch``/``fetchrow``/``execute`` are AsyncMocks, so the SQL and parameters
can be asserted without a database.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from restaurant_api.adapters.store.postgres import PostgresRestaurantStore
from restaurant_api.core.dependencies import get_restaurant_store
from restaurant_api.core.errors import StoreAppError
from restaurant_api.schemas.restaurant import Restaurant, RestaurantPayload


class FakePool:
    def __init__(self, conn: MagicMock | None = None, acquire_error: Exception | None = None) -> None:
        self.conn = conn or MagicMock()
        self.acquire_error = acquire_error
        self.close = AsyncMock()

    @asynccontextmanager
    async def _acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        yield self.conn

    def acquire(self):
        return self._acquire()


def _row(id: int = 1, name: str = "Pasta Place", cuisine: str = "Italian", rating: float = 4.5) -> dict:
    return {"id": id, "name": name, "cuisine": cuisine, "rating": rating}


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


@pytest.fixture
def conn() -> MagicMock:
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="CREATE TABLE")
    return conn


@pytest.fixture
def store(conn: MagicMock) -> PostgresRestaurantStore:
    return PostgresRestaurantStore(FakePool(conn))


@pytest.fixture
def payload() -> RestaurantPayload:
    return RestaurantPayload(name="Pasta Place", cuisine="Italian", rating=4.5)


def test_list_orders_by_id(store: PostgresRestaurantStore, conn: MagicMock):
    conn.fetch.return_value = [_row(1), _row(2, name="Sushi Bar", cuisine="Japanese", rating=4)]

    result = asyncio.run(store.list_all())

    sql = _normalize(conn.fetch.await_args.args[0])
    assert sql == 'SELECT id, name, cuisine, rating FROM "restaurants" ORDER BY id ASC'
    assert [r.id for r in result] == [1, 2]
    assert isinstance(result[1], Restaurant)


def test_get_uses_parameter_and_maps_missing_row_to_none(store: PostgresRestaurantStore, conn: MagicMock):
    assert asyncio.run(store.get(7)) is None

    sql, param = conn.fetchrow.await_args.args
    assert "WHERE id = $1" in sql
    assert param == 7


def test_create_inserts_and_returns_row(store: PostgresRestaurantStore, conn: MagicMock, payload: RestaurantPayload):
    conn.fetchrow.return_value = _row(3)

    created = asyncio.run(store.create(payload))

    sql, *params = conn.fetchrow.await_args.args
    assert _normalize(sql).startswith('INSERT INTO "restaurants" (name, cuisine, rating) VALUES ($1, $2, $3)')
    assert "RETURNING id, name, cuisine, rating" in sql
    assert params == ["Pasta Place", "Italian", 4.5]
    assert created == Restaurant(id=3, name="Pasta Place", cuisine="Italian", rating=4.5)


def test_update_replaces_all_fields(store: PostgresRestaurantStore, conn: MagicMock, payload: RestaurantPayload):
    conn.fetchrow.return_value = _row(5)

    updated = asyncio.run(store.update(5, payload))

    sql, *params = conn.fetchrow.await_args.args
    assert "SET name = $1, cuisine = $2, rating = $3" in _normalize(sql)
    assert "WHERE id = $4" in sql
    assert params == ["Pasta Place", "Italian", 4.5, 5]
    assert updated is not None and updated.id == 5


def test_update_unknown_id_returns_none(store: PostgresRestaurantStore, payload: RestaurantPayload):
    assert asyncio.run(store.update(404, payload)) is None


def test_delete_returns_last_state(store: PostgresRestaurantStore, conn: MagicMock):
    conn.fetchrow.return_value = _row(9, name="Gone Grill")

    deleted = asyncio.run(store.delete(9))

    sql, param = conn.fetchrow.await_args.args
    assert _normalize(sql) == 'DELETE FROM "restaurants" WHERE id = $1 RETURNING id, name, cuisine, rating'
    assert param == 9
    assert deleted is not None and deleted.name == "Gone Grill"


def test_query_failure_becomes_store_error_without_detail(store: PostgresRestaurantStore, conn: MagicMock):
    conn.fetch.side_effect = RuntimeError('relation "restaurants" does not exist')

    with pytest.raises(StoreAppError) as exc_info:
        asyncio.run(store.list_all())

    assert exc_info.value.message == "An internal server error occurred"
    assert "relation" not in exc_info.value.message
    assert exc_info.value.details["operation"] == "list"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_pool_acquire_failure_becomes_store_error():
    store = PostgresRestaurantStore(FakePool(acquire_error=ConnectionRefusedError("connection refused")))

    with pytest.raises(StoreAppError):
        asyncio.run(store.get(1))


def test_ensure_schema_creates_table(store: PostgresRestaurantStore, conn: MagicMock):
    asyncio.run(store.ensure_schema())

    ddl = _normalize(conn.execute.await_args.args[0])
    assert ddl.startswith('CREATE TABLE IF NOT EXISTS "restaurants"')
    assert "id SERIAL PRIMARY KEY" in ddl


def test_custom_table_name(conn: MagicMock):
    store = PostgresRestaurantStore(FakePool(conn), table_name="diners")

    asyncio.run(store.list_all())

    assert 'FROM "diners"' in conn.fetch.await_args.args[0]


@pytest.mark.parametrize("table_name", ["restaurants; DROP TABLE x", "bad-name", "1abc"])
def test_rejects_unsafe_table_names(table_name: str):
    with pytest.raises(ValueError):
        PostgresRestaurantStore(FakePool(), table_name=table_name)


def test_close_closes_pool():
    pool = FakePool()
    store = PostgresRestaurantStore(pool)

    asyncio.run(store.close())

    pool.close.assert_awaited_once()


class TestStoreFailureOverHttp:
    """A failing store surfaces as a generic 500 on every restaurant route."""

    @pytest.fixture
    def failing_client(self, app, conn: MagicMock):
        error = RuntimeError("could not connect to server: 10.0.0.5:5432 SELECT * FROM restaurants")
        conn.fetch.side_effect = error
        conn.fetchrow.side_effect = error
        store = PostgresRestaurantStore(FakePool(conn))
        app.dependency_overrides[get_restaurant_store] = lambda: store
        with TestClient(app) as client:
            yield client
        app.dependency_overrides.clear()

    @pytest.mark.parametrize(
        ("method", "path", "body"),
        [
            ("GET", "/restaurants", None),
            ("GET", "/restaurants/1", None),
            ("POST", "/restaurants", {"name": "A", "cuisine": "B", "rating": 1}),
            ("PUT", "/restaurants/1", {"name": "A", "cuisine": "B", "rating": 1}),
            ("DELETE", "/restaurants/1", None),
        ],
    )
    def test_returns_generic_500(self, failing_client: TestClient, method: str, path: str, body):
        resp = failing_client.request(method, path, json=body)

        assert resp.status_code == 500
        assert resp.json() == {"error": "An internal server error occurred"}
        assert "10.0.0.5" not in resp.text
        assert "SELECT" not in resp.text
        assert "RuntimeError" not in resp.text

    def test_validation_runs_before_store(self, failing_client: TestClient, conn: MagicMock):
        resp = failing_client.post("/restaurants", json={"name": "A", "cuisine": "B", "rating": "1"})

        assert resp.status_code == 400
        conn.fetchrow.assert_not_awaited()
