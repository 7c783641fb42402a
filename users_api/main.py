"""
Users API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error rendering
       and the store's lifecycle in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       that owns its Database.
Who:   uvicorn (`--factory users_api.main:create_app`, or `python -m users_api`)
       and the tests. Nothing is built at import time.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → Security hdrs   │
    │                                                     │
    │  Routes: /users (CRUD)          /health             │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFound→404  Database→500  │
    │    HTTPException→own status   anything else→500     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    create_app: Database constructed (engine + pool), stored on app.state
    Startup:    logging configured, configuration checked
    Shutdown:   Database disposed (pooled connections closed)

Every error body has the shape {"error": "<message>"}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api import __version__
from users_api.config import Settings, settings as default_settings
from users_api.database import Database
from users_api.exceptions import DatabaseError, UsersApiError
from users_api.middleware.logging import RequestLoggingMiddleware
from users_api.middleware.request_id import RequestIDMiddleware, request_id_var
from users_api.middleware.security_headers import (
    DEFAULT_SECURITY_HEADERS,
    SecurityHeadersMiddleware,
)
from users_api.routes import health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    so container runtimes collect it.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access logger replaces uvicorn's; SQL echo only when asked for
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level == "DEBUG" else logging.WARNING
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and report configuration problems.
    Shutdown: dispose the Database owned by this app.
    """
    config: Settings = app.state.settings
    setup_logging(config.log_level)
    logger.info("Users API %s starting up...", __version__)

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports the store as disconnected
        logger.error("Configuration error: %s", str(e))

    logger.info("App is listening at http://%s:%d", config.listen_host, config.port)

    yield

    logger.info("Users API shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"error": message}` responses.

    Handler hierarchy:
        UsersApiError (ValidationError 400, NotFoundError 404, DatabaseError 500)
        StarletteHTTPException → its own status and detail (404 route, 405 method)
        Exception              → 500, message withheld, traceback logged
    """

    @app.exception_handler(UsersApiError)
    async def handle_app_error(request: Request, exc: UsersApiError):
        rid = request_id_var.get("")
        if isinstance(exc, DatabaseError):
            # Traceback was logged where the driver raised; add the request id
            logger.error("[%s] Database error | Context: %s", rid, exc.context)
        else:
            logger.info("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        # Rendered outside the middleware stack, so the headers are added here
        return error_response(500, "Internal Server Error", headers=DEFAULT_SECURITY_HEADERS)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:   Settings to use (defaults to the environment-loaded settings)
        database: Database to serve from; built from `config` when omitted.
                  The app takes ownership and disposes it on shutdown.
    """
    config = config or default_settings
    if database is None:
        database = Database(config.sqlalchemy_url, echo=config.log_level == "DEBUG")

    app = FastAPI(
        title="Users API",
        description="CRUD operations over a single Users relation.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.database = database

    # Last added runs first: RequestID → Logging → SecurityHeaders → route
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)

    return app
