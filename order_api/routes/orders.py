"""
Order API Order Route Handlers
==============================

What:  GET/POST /orders and GET/PATCH/PUT/DELETE /orders/{id}.
How:   Read the JSON body, validate it against the declarative rules, then
       delegate to OrderService. Validation failures are raised before the
       service ever checks out a connection.

The `{order_id}` segment matches optionally negative integers, the same
range `ord_no` accepts on create; any other segment falls through to the
"Route not found" fallback.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from starlette.convertors import Convertor, register_url_convertor

from order_api.database import Database, get_database
from order_api.exceptions import ValidationError
from order_api.schemas.order import (
    ErrorResponse,
    MessageResponse,
    OrderCreatedResponse,
    OrderRead,
    ValidationErrorResponse,
    Violation,
)
from order_api.services.order_service import OrderService
from order_api.validation import amount_patch, order_payload


class SignedIntConvertor(Convertor[int]):
    """Starlette's `int` convertor, extended to a leading minus sign."""

    regex = "-?[0-9]+"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        return str(int(value))


# Must be registered before the routes below compile their paths.
register_url_convertor("signed_int", SignedIntConvertor())

router = APIRouter(tags=["Orders"])

_STORAGE_ERROR = {500: {"description": "Storage failure", "model": ErrorResponse}}
_BAD_BODY = {400: {"description": "Validation failure", "model": ValidationErrorResponse}}
_NOT_FOUND = {404: {"description": "Order not found", "model": MessageResponse}}


def get_order_service(
    request: Request, database: Database = Depends(get_database)
) -> OrderService:
    return OrderService(database, allow_rekey=request.app.state.settings.allow_order_rekey)


async def json_body(request: Request) -> Dict[str, Any]:
    """
    The request body as a JSON object.

    An empty body reads as ``{}`` so that required-field rules report what
    is missing. Anything that is not a JSON object is a validation error.
    """
    if not (await request.body()).strip():
        return {}
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise ValidationError(
            [Violation(field="body", message="Request body must be a JSON object")]
        )
    return body


@router.get(
    "/orders",
    response_model=List[OrderRead],
    responses=_STORAGE_ERROR,
    summary="Retrieve a list of orders",
)
async def list_orders(
    service: OrderService = Depends(get_order_service),
) -> List[Dict[str, Any]]:
    return await service.list_orders()


@router.get(
    "/orders/{order_id:signed_int}",
    response_model=OrderRead,
    responses={**_NOT_FOUND, **_STORAGE_ERROR},
    summary="Retrieve a single order by ID",
)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> Dict[str, Any]:
    return await service.get_order(order_id)


@router.post(
    "/orders",
    status_code=201,
    response_model=OrderCreatedResponse,
    responses={**_BAD_BODY, **_STORAGE_ERROR},
    summary="Create a new order",
)
async def create_order(
    body: Dict[str, Any] = Depends(json_body),
    service: OrderService = Depends(get_order_service),
) -> OrderCreatedResponse:
    payload = order_payload(body)
    order_id = await service.create_order(payload)
    return OrderCreatedResponse(message="Order created", orderId=order_id)


@router.patch(
    "/orders/{order_id:signed_int}",
    response_model=MessageResponse,
    responses={**_BAD_BODY, **_STORAGE_ERROR},
    summary="Update part of an order",
    description="Succeeds whether or not the order exists.",
)
async def update_order(
    order_id: int,
    body: Dict[str, Any] = Depends(json_body),
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    patch = amount_patch(body)
    await service.update_amount(order_id, patch)
    return MessageResponse(message="Order updated")


@router.put(
    "/orders/{order_id:signed_int}",
    response_model=MessageResponse,
    responses={**_BAD_BODY, **_STORAGE_ERROR},
    summary="Replace an order",
    description=(
        "Overwrites every column, including the order number itself unless "
        "re-keying is disabled. Succeeds whether or not the order exists."
    ),
)
async def replace_order(
    order_id: int,
    body: Dict[str, Any] = Depends(json_body),
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    payload = order_payload(body)
    await service.replace_order(order_id, payload)
    return MessageResponse(message="Order replaced")


@router.delete(
    "/orders/{order_id:signed_int}",
    response_model=MessageResponse,
    responses=_STORAGE_ERROR,
    summary="Delete an order",
    description="Succeeds whether or not the order exists.",
)
async def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    await service.delete_order(order_id)
    return MessageResponse(message="Order deleted")
