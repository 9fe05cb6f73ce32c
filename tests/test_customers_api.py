"""
Order API Customer Endpoint and Routing Tests
=============================================

What we test:
    ✅ GET /users returns rows verbatim and never more than the limit
    ✅ Unknown paths and unsupported methods fall through to "Route not found"
    ✅ Request IDs are generated or echoed back
    ✅ API docs can be switched off
"""

import pytest
from sqlalchemy import text

from conftest import build_client
from order_api.main import create_app


async def _add_customers(database, count: int) -> None:
    async with database.connection() as conn:
        for i in range(count):
            await conn.execute(
                text(
                    "INSERT INTO customer (customer_id, cust_name, city, grade) "
                    "VALUES (:id, :name, :city, :grade)"
                ),
                {"id": f"C{i:03d}", "name": f"Customer {i}", "city": "Lisbon", "grade": i % 3},
            )


class TestListCustomers:

    @pytest.mark.asyncio
    async def test_empty_table(self, test_client):
        response = await test_client.get("/users")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_rows_returned_verbatim(self, test_client, database):
        await _add_customers(database, 1)

        response = await test_client.get("/users")

        assert response.json() == [
            {"customer_id": "C000", "cust_name": "Customer 0", "city": "Lisbon", "grade": 0}
        ]

    @pytest.mark.asyncio
    async def test_never_more_than_ten(self, test_client, database):
        await _add_customers(database, 15)

        response = await test_client.get("/users")

        assert response.status_code == 200
        assert len(response.json()) == 10

    @pytest.mark.asyncio
    async def test_storage_failure(self, test_client, database):
        async with database.engine.begin() as conn:
            await conn.execute(text("DROP TABLE customer"))

        response = await test_client.get("/users")

        assert response.status_code == 500
        assert response.json()["error"] == "storage_unavailable"
        assert database.checked_out() == 0


class TestRouting:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/nowhere"),
            ("GET", "/orders/abc"),
            ("GET", "/orders/-"),
            ("GET", "/orders/1.5"),
            ("DELETE", "/orders/--5"),
            ("GET", "/orders/1001/items"),
            ("POST", "/users"),
            ("DELETE", "/orders"),
        ],
    )
    async def test_route_not_found(self, test_client, method, path):
        response = await test_client.request(method, path)

        assert response.status_code == 404
        assert response.json() == {"message": "Route not found"}

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/orders")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/orders", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_docs_served(self, test_client):
        assert (await test_client.get("/api-docs")).status_code == 200
        assert "/orders/{order_id}" in (await test_client.get("/openapi.json")).json()["paths"]

    @pytest.mark.asyncio
    async def test_docs_disabled(self, test_settings, pool_guard):
        app = create_app(settings=test_settings.model_copy(update={"enable_docs": False}), database=pool_guard)

        async with build_client(app) as client:
            response = await client.get("/api-docs")

        assert response.status_code == 404
        assert response.json() == {"message": "Route not found"}
