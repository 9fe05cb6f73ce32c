"""
Order API Order Table
=====================

What:  ORM mapping of the `orders` table.
Who:   OrderService builds its SELECT/INSERT/UPDATE/DELETE statements from
       `orders_table`; tests create the schema from `Base.metadata`.

The `customer` table is deliberately not mapped: customers are returned
verbatim as whatever columns the database holds.

Column notes:
    - ord_no: business identifier supplied by the client, never generated
    - purch_amt: fixed-point in storage, read back as float for JSON
    - customer_id: references the customer table, string form
"""

from datetime import date

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from order_api.database import Base


class Order(Base):
    """A purchase identified by its order number."""

    __tablename__ = "orders"

    ord_no: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        comment="Business order number, unique per order",
    )

    purch_amt: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
        comment="Purchase amount",
    )

    ord_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Calendar date the order was placed",
    )

    customer_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Identifier of the ordering customer",
    )

    def __repr__(self) -> str:
        return f"<Order(ord_no={self.ord_no}, customer_id='{self.customer_id}')>"


orders_table = Order.__table__
