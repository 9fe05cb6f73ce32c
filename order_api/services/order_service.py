"""
Order API Order Service
=======================

What:  CRUD statements over the `orders` table.
How:   Each public method checks out one pooled connection, executes exactly
       one parameterized statement, and maps the result. The pool commits,
       rolls back and releases; storage failures surface as classified
       `StorageError`s.
Who:   Built per request by the order routes with the application's
       `Database` injected.

Statement inventory:
    list_orders      SELECT ... FROM orders
    get_order        SELECT ... FROM orders WHERE ord_no = :id
    create_order     INSERT INTO orders (...) VALUES (...)
    update_amount    UPDATE orders SET purch_amt = :amt WHERE ord_no = :id
    replace_order    UPDATE orders SET <all columns> WHERE ord_no = :id
    delete_order     DELETE FROM orders WHERE ord_no = :id

Updates and deletes do not check the affected row count: touching a
missing order is a silent no-op.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update

from order_api.database import Database
from order_api.exceptions import NotFoundError, ValidationError
from order_api.models.order import orders_table
from order_api.schemas.order import OrderAmountPatch, OrderPayload, Violation

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order statements over an injected connection pool.

    Args:
        database: the shared pool
        allow_rekey: whether `replace_order` may change `ord_no`
    """

    def __init__(self, database: Database, allow_rekey: bool = True):
        self._database = database
        self._allow_rekey = allow_rekey

    async def list_orders(self) -> List[Dict[str, Any]]:
        async with self._database.connection() as conn:
            result = await conn.execute(select(orders_table))
            return [dict(row) for row in result.mappings().all()]

    async def get_order(self, order_id: int) -> Dict[str, Any]:
        """
        The order with number `order_id`.

        Raises:
            NotFoundError: no such order (→ 404)
            StorageError: pool or statement failure (→ 500)
        """
        async with self._database.connection() as conn:
            result = await conn.execute(
                select(orders_table).where(orders_table.c.ord_no == order_id)
            )
            row = result.mappings().first()

        if row is None:
            raise NotFoundError(
                message="Order not found", resource="order", resource_id=order_id
            )
        return dict(row)

    async def create_order(self, payload: OrderPayload) -> int:
        """Insert a new order and return the identifier the INSERT reported."""
        async with self._database.connection() as conn:
            result = await conn.execute(
                insert(orders_table).values(**payload.model_dump())
            )
            inserted = result.inserted_primary_key

        order_id = inserted[0] if inserted else payload.ord_no
        logger.info("Order %s created for customer %s", order_id, payload.customer_id)
        return order_id

    async def update_amount(self, order_id: int, patch: OrderAmountPatch) -> None:
        """Set `purch_amt`; a patch without an amount executes nothing."""
        if patch.purch_amt is None:
            logger.debug("Order %s: empty partial update, nothing to do", order_id)
            return

        async with self._database.connection() as conn:
            result = await conn.execute(
                update(orders_table)
                .where(orders_table.c.ord_no == order_id)
                .values(purch_amt=patch.purch_amt)
            )
            affected = result.rowcount
        _log_affected("updated", order_id, affected)

    async def replace_order(self, order_id: int, payload: OrderPayload) -> None:
        """
        Overwrite every column of order `order_id`, including `ord_no`.

        Raises:
            ValidationError: re-keying is disabled and the body's `ord_no`
                differs from `order_id` (→ 400, pool untouched)
        """
        if not self._allow_rekey and payload.ord_no != order_id:
            raise ValidationError(
                [
                    Violation(
                        field="ord_no",
                        message="Order number must match the order being replaced",
                    )
                ],
                context={"order_id": order_id, "ord_no": payload.ord_no},
            )

        async with self._database.connection() as conn:
            result = await conn.execute(
                update(orders_table)
                .where(orders_table.c.ord_no == order_id)
                .values(**payload.model_dump())
            )
            affected = result.rowcount
        _log_affected("replaced", order_id, affected)

    async def delete_order(self, order_id: int) -> None:
        async with self._database.connection() as conn:
            result = await conn.execute(
                delete(orders_table).where(orders_table.c.ord_no == order_id)
            )
            affected = result.rowcount
        _log_affected("deleted", order_id, affected)


def _log_affected(action: str, order_id: int, rowcount: Optional[int]) -> None:
    if rowcount == 0:
        logger.info("Order %s not %s: no matching row", order_id, action)
    else:
        logger.info("Order %s %s", order_id, action)
