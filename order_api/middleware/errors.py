"""
Order API Unexpected Error Middleware
=====================================

What:  Turns any exception no handler claimed into a 500 JSON response.
How:   Sits innermost in the middleware chain, so the response still passes
       through request-ID tagging and the access log on its way out.

Starlette sends `Exception` handlers to its outermost error middleware,
beyond the reach of the request-ID and logging middleware; this class
takes over that role one layer further in.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from order_api.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class UnexpectedErrorMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            rid = request_id_var.get("")
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "internal_server_error",
                    "message": "An unexpected error occurred.",
                    "request_id": rid,
                },
            )
