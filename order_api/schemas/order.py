"""
Order API Request/Response Schemas
==================================

What:  Pydantic models defining the API contract.
How:   Request bodies are checked by the declarative rules in
       `order_api.validation` first; the normalized values then populate
       `OrderPayload`. Response models drive serialization and OpenAPI docs.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class OrderPayload(BaseModel):
    """Normalized body of POST /orders and PUT /orders/{id}."""
    ord_no: int = Field(description="Order number")
    purch_amt: float = Field(description="Purchase amount")
    ord_date: date = Field(description="Order date")
    customer_id: str = Field(min_length=1, description="Customer identifier")


class OrderAmountPatch(BaseModel):
    """Normalized body of PATCH /orders/{id}; None means nothing to change."""
    purch_amt: Optional[float] = Field(default=None, description="New purchase amount")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class OrderRead(BaseModel):
    """One row of the orders table."""
    ord_no: int
    purch_amt: float
    ord_date: date
    customer_id: str

    model_config = {"from_attributes": True}


class OrderCreatedResponse(BaseModel):
    """Returned by POST /orders with HTTP 201."""
    message: str = Field(default="Order created")
    orderId: int = Field(description="Identifier of the stored order")


class MessageResponse(BaseModel):
    """Plain confirmation or not-found body."""
    message: str


class Violation(BaseModel):
    """One failed field rule."""
    field: str = Field(description="Name of the offending body field")
    message: str = Field(description="Human-readable rule message")


class ValidationErrorResponse(BaseModel):
    """400 body: every violation, in rule order."""
    errors: List[Violation]


class ErrorResponse(BaseModel):
    """
    500 body for classified failures.

    Example:
        {
            "error": "pool_exhausted",
            "message": "The database is busy. Please try again later.",
            "request_id": "3f2a9c1d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
    detail: Optional[str] = Field(
        default=None,
        description="Raw storage error text (only when expose_storage_errors is enabled)",
    )
