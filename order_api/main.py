"""
Order API FastAPI Application Factory
=====================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the connection pool from settings (or takes an
       injected one), registers middleware, exception handlers and routes,
       and returns the app.
Who:   Served by an ASGI server (uvicorn order_api.main:app); tests call
       create_app() with their own settings and pool.

Application Layout:
    Middleware:   RequestID → Logging → UnexpectedError
    Routes:       GET /users
                  GET|POST /orders
                  GET|PATCH|PUT|DELETE /orders/{id}
    Errors:       ValidationError → 400 {"errors": [...]}
                  NotFoundError   → 404 {"message": ...}
                  unmatched route → 404 {"message": "Route not found"}
                  StorageError    → 500 {"error": <code>, ...}
                  anything else   → 500 {"error": "internal_server_error", ...}

Lifecycle:
    Startup:   configure logging, log the pool configuration
    Shutdown:  dispose the pool (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from order_api import __version__
from order_api.config import Settings, settings as default_settings
from order_api.database import Database
from order_api.exceptions import NotFoundError, StorageError, ValidationError
from order_api.middleware.errors import UnexpectedErrorMiddleware
from order_api.middleware.logging import RequestLoggingMiddleware
from order_api.middleware.request_id import RequestIDMiddleware, request_id_var
from order_api.routes import customers, orders
from order_api.schemas.order import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(config.log_level)
    logger.info("Order API %s starting up", __version__)
    logger.info(
        "Connection pool: size=%d acquire_timeout=%.1fs connect_timeout=%.1fs",
        config.db_pool_size,
        config.db_pool_timeout,
        config.db_connect_timeout,
    )
    logger.info("Listening address: http://%s:%d", config.backend_host, config.backend_port)

    yield

    logger.info("Order API shutting down")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and response bodies.

    Storage failures are logged with the raw driver text; clients only see
    the classification code unless `expose_storage_errors` is enabled.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation failed for fields %s", rid, exc.context.get("fields"))
        return JSONResponse(
            status_code=400,
            content={"errors": [v.model_dump() for v in exc.violations]},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] %s %s failed [%s]: %s | Context: %s",
            rid,
            request.method,
            request.url.path,
            exc.code,
            exc.detail,
            exc.context,
        )
        body = ErrorResponse(error=exc.code, message=exc.message, request_id=rid)
        if request.app.state.settings.expose_storage_errors:
            body.detail = exc.detail
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # 405 means the path exists under another method: still not a route.
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": "Route not found"})
        return await http_exception_handler(request, exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration; defaults to the environment-loaded settings
        database: connection pool to serve from; built from `settings` when
            omitted. The app disposes it on shutdown either way.
    """
    config = settings or default_settings

    app = FastAPI(
        title="Order API",
        description="API for managing orders and customers",
        version=__version__,
        docs_url="/api-docs" if config.enable_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if config.enable_docs else None,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.database = database or Database(config)

    # Last added runs first: RequestID wraps Logging wraps UnexpectedError.
    app.add_middleware(UnexpectedErrorMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(customers.router)
    app.include_router(orders.router)

    return app


app = create_app()
