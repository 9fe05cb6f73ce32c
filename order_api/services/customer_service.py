"""
Order API Customer Service
==========================

What:  Read-only access to the `customer` table.
How:   One bounded, parameterized SELECT per call; rows are returned as
       plain dicts keyed by whatever columns the table has.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import text

from order_api.database import Database

logger = logging.getLogger(__name__)

_LIST_CUSTOMERS = text("SELECT * FROM customer LIMIT :limit")


class CustomerService:
    """Customer queries over an injected connection pool."""

    def __init__(self, database: Database, list_limit: int = 10):
        self._database = database
        self._list_limit = list_limit

    async def list_customers(self) -> List[Dict[str, Any]]:
        """
        First `list_limit` customers, in storage order.

        Raises:
            StorageError: pool or statement failure (→ 500)
        """
        async with self._database.connection() as conn:
            result = await conn.execute(_LIST_CUSTOMERS, {"limit": self._list_limit})
            rows = [dict(row) for row in result.mappings().all()]
        logger.debug("Listed %d customers", len(rows))
        return rows
