"""
FastAPI Application Entry Point

Builds the Bookshelf API application: routers, CORS, error handlers.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Tests import the module-level `app` and override dependencies

2. Lifespan Events
   - startup: create tables for the embedded database, warn about an
     unset SECRET_KEY
   - shutdown: dispose of the engine's connection pool

3. Middleware Stack
   - CORS: the web client's origin(s), credentials allowed

4. Exception Handlers
   - Domain errors (bookshelf.exceptions) → their status and {"detail"}
   - Request validation → 400 with the failing fields
   - Rate limit → 429
   - Database and unexpected errors → generic 500, details only in the log
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from bookshelf import __version__
from bookshelf.config import get_settings
from bookshelf.database import create_tables, engine
from bookshelf.exceptions import BookshelfError, ValidationError
from bookshelf.routers import auth_router, books_router, search_router, tags_router
from bookshelf.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating the app
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Request locations FastAPI prefixes to every error "loc"
_LOCATIONS = {"body", "query", "path", "cookie", "header"}


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.secret_key is None:
        logger.warning(
            "SECRET_KEY is not set; using a random per-process key. "
            "Sessions will not survive a restart."
        )

    if settings.auto_create_tables:
        create_tables()
        logger.info("Database schema ready")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    engine.dispose()


# =============================================================================
# Exception Handlers
# =============================================================================
async def bookshelf_exception_handler(request: Request, exc: BookshelfError) -> JSONResponse:
    """
    Translate a domain error into its HTTP status and {"detail": ...}.

    A ValidationError that names its field also gets the same "errors"
    list as request validation failures.
    """
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")

    content = {"detail": exc.detail}
    if isinstance(exc, ValidationError) and exc.field:
        content["errors"] = [{"field": exc.field, "message": exc.detail}]
    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Report request validation failures as 400, naming each failing field.

    Example body:
        {"detail": "Invalid request",
         "errors": [{"field": "rating", "message": "Input should be less than or equal to 5"}]}
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATIONS]
        errors.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle SQLAlchemy database errors.

    The driver message goes to the log only; clients get a generic 500.
    """
    logger.error(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all exception handler.

    In production, hide internal errors from users.
    In debug mode, show more details.
    """
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)

    detail = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Bookshelf API

A personal reading tracker.

### Features
- **Books**: Keep a private shelf with reading status, rating and notes
- **Tags**: Label books with your own coloured tags
- **Search**: Find books in the Open Library catalog

### Authentication
Register or log in; the session token is kept in an HttpOnly cookie.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # slowapi's decorators look the limiter up on app.state
    app.state.limiter = limiter

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        # The session cookie must be sent cross-origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    app.add_exception_handler(BookshelfError, bookshelf_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    # All endpoints live under the API prefix: /api/books, /api/tags, ...
    api_prefix = settings.api_prefix

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(tags_router, prefix=api_prefix)
    app.include_router(search_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        f"{api_prefix}/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running.",
    )
    async def health_check() -> dict:
        """
        Health check endpoint.

        Used by load balancers, container probes and monitoring. Does not
        require authentication.
        """
        return {"status": "ok"}

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": __version__,
            "docs": "/docs",
            "health": f"{api_prefix}/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookshelf.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# This allows running the app directly with: python -m bookshelf.main
# In production, use: uvicorn bookshelf.main:app --host 0.0.0.0 --port 3001

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookshelf.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
