"""
Books API - FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       lifespan() owns the database engine for the life of the process.
Who:   uvicorn (`uvicorn app.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ /books, /books/{id}          │ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→500* │ Body→400 │ Media→415 │ →500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
    * settings.not_found_status_code

Lifecycle:
    Startup:  logging → engine/pool → schema (if auto_create_schema)
    Shutdown: dispose engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import create_schema, dispose_engine, init_engine
from app.dependencies import is_json_content_type
from app.exceptions import BadRequestError, BooksApiError, UnsupportedMediaTypeError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import books, health

logger = logging.getLogger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH"}

HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
    415: "unsupported_media_type",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] app.services.book_service: Book 1 created
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Create the engine and its connection pool
        3. Create missing tables when auto_create_schema is on

    Shutdown:
        1. Dispose the engine
    """
    setup_logging()
    logger.info("Books API %s starting up...", __version__)

    engine = init_engine()

    if settings.auto_create_schema:
        try:
            await create_schema(engine)
        except (SQLAlchemyError, OSError) as e:
            # Keep serving: /health reports the database as disconnected
            logger.error("Could not create database schema: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Books API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # The catch-all handler runs outside RequestIDMiddleware, where the
    # ContextVar is already reset; request.state shares the ASGI scope.
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: dict | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    rid = _request_id(request)
    content = {"error": error, "message": message, "request_id": rid}
    if details:
        content["details"] = details
    # Set here too: the catch-all handler answers outside RequestIDMiddleware
    headers = {**(headers or {}), REQUEST_ID_HEADER: rid} if rid else headers
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses.

    Handler hierarchy:
        BooksApiError           → status_code_for(exc.kind)
        RequestValidationError  → BadRequestError (400), or
                                  UnsupportedMediaTypeError (415) for non-JSON bodies
        HTTPException           → its own status (404, 405, ...)
        Exception (fallback)    → 500

    Response bodies never contain stack traces or SQL; those are logged.
    """

    @app.exception_handler(BooksApiError)
    async def handle_books_api_error(request: Request, exc: BooksApiError):
        status_code = exc.status_code
        logger.warning(
            "[%s] %s (%d): %s | Context: %s",
            _request_id(request),
            exc.kind.value,
            status_code,
            exc.message,
            exc.context,
        )
        return error_response(request, status_code, exc.kind.value, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        content_type = request.headers.get("content-type")
        error: BooksApiError
        if request.method in BODY_METHODS and not is_json_content_type(content_type):
            error = UnsupportedMediaTypeError(content_type=content_type)
        else:
            error = BadRequestError(context={"errors": errors})

        logger.warning("[%s] Request rejected (%s): %s", _request_id(request), error.kind.value, errors)
        return error_response(
            request,
            error.status_code,
            error.kind.value,
            error.message,
            details={"errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(
            request,
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", _request_id(request), str(exc), exc_info=True)
        return error_response(
            request,
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Books API",
        description="CRUD service for books backed by a relational table.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(books.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
