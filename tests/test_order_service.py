"""
Order API Order Service Unit Tests
==================================

What:  OrderService behavior against pool doubles (no real database).

What we test:
    ✅ Missing order raises NotFoundError
    ✅ INSERT reports the stored primary key
    ✅ Empty partial update and rejected re-key never take a connection
    ✅ Zero-row UPDATE/DELETE are silent no-ops
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import pool_yielding
from order_api.exceptions import NotFoundError, ValidationError
from order_api.schemas.order import OrderAmountPatch, OrderPayload
from order_api.services.order_service import OrderService


def _payload(ord_no: int = 1001) -> OrderPayload:
    return OrderPayload(
        ord_no=ord_no, purch_amt=150.5, ord_date=date(2024, 1, 1), customer_id="C001"
    )


def _connection(result) -> AsyncMock:
    conn = AsyncMock()
    conn.execute = AsyncMock(return_value=result)
    return conn


class TestOrderServiceRead:

    @pytest.mark.asyncio
    async def test_get_order_found(self):
        row = {"ord_no": 1001, "purch_amt": 150.5, "ord_date": date(2024, 1, 1), "customer_id": "C001"}
        result = MagicMock()
        result.mappings.return_value.first.return_value = row
        conn = _connection(result)

        service = OrderService(pool_yielding(conn))
        order = await service.get_order(1001)

        assert order == row
        conn.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_order_not_found(self):
        result = MagicMock()
        result.mappings.return_value.first.return_value = None
        service = OrderService(pool_yielding(_connection(result)))

        with pytest.raises(NotFoundError) as info:
            await service.get_order(4242)

        assert info.value.message == "Order not found"
        assert info.value.context["resource_id"] == 4242

    @pytest.mark.asyncio
    async def test_list_orders_empty(self):
        result = MagicMock()
        result.mappings.return_value.all.return_value = []
        service = OrderService(pool_yielding(_connection(result)))

        assert await service.list_orders() == []


class TestOrderServiceWrite:

    @pytest.mark.asyncio
    async def test_create_order_returns_inserted_key(self):
        result = MagicMock()
        result.inserted_primary_key = (1001,)
        service = OrderService(pool_yielding(_connection(result)))

        assert await service.create_order(_payload()) == 1001

    @pytest.mark.asyncio
    async def test_update_without_amount_takes_no_connection(self, pool_guard):
        service = OrderService(pool_guard)

        await service.update_amount(1001, OrderAmountPatch())

        pool_guard.connection.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_missing_order_is_silent(self):
        result = MagicMock()
        result.rowcount = 0
        conn = _connection(result)
        service = OrderService(pool_yielding(conn))

        await service.update_amount(9999, OrderAmountPatch(purch_amt=10.0))

        conn.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing_order_is_silent(self):
        result = MagicMock()
        result.rowcount = 0
        service = OrderService(pool_yielding(_connection(result)))

        assert await service.delete_order(9999) is None

    @pytest.mark.asyncio
    async def test_replace_rekey_allowed_by_default(self):
        result = MagicMock()
        result.rowcount = 1
        conn = _connection(result)
        service = OrderService(pool_yielding(conn))

        await service.replace_order(1001, _payload(ord_no=2002))

        conn.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_replace_rekey_rejected_when_disabled(self, pool_guard):
        service = OrderService(pool_guard, allow_rekey=False)

        with pytest.raises(ValidationError) as info:
            await service.replace_order(1001, _payload(ord_no=2002))

        assert [v.field for v in info.value.violations] == ["ord_no"]
        pool_guard.connection.assert_not_called()

    @pytest.mark.asyncio
    async def test_replace_same_key_when_rekey_disabled(self):
        result = MagicMock()
        result.rowcount = 1
        conn = _connection(result)
        service = OrderService(pool_yielding(conn), allow_rekey=False)

        await service.replace_order(1001, _payload(ord_no=1001))

        conn.execute.assert_awaited_once()
