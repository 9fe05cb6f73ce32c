"""
Order API Customer Route Handlers
=================================

What:  GET /users, the bounded customer listing.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from order_api.database import Database, get_database
from order_api.schemas.order import ErrorResponse
from order_api.services.customer_service import CustomerService

router = APIRouter(tags=["Customers"])


def get_customer_service(
    request: Request, database: Database = Depends(get_database)
) -> CustomerService:
    return CustomerService(database, list_limit=request.app.state.settings.customer_list_limit)


@router.get(
    "/users",
    response_model=List[Dict[str, Any]],
    responses={500: {"description": "Storage failure", "model": ErrorResponse}},
    summary="Retrieve a list of customers",
    description="Returns at most `customer_list_limit` (default 10) customer rows, columns as stored.",
)
async def list_customers(
    service: CustomerService = Depends(get_customer_service),
) -> List[Dict[str, Any]]:
    return await service.list_customers()
